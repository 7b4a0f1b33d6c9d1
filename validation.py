"""
Input validation for registration submissions.

`validate` returns the first problem found, or None. Missing fields are
reported together; after that the checks run in order email, quantity,
ticket type.
"""

import math
import re
from typing import Any, Mapping, Optional

from errors import (
    InvalidEmail,
    InvalidQuantity,
    InvalidTicketType,
    MissingFields,
    ValidationFailure,
)
from pricing import TICKET_PRICES

REQUIRED_FIELDS = ("firstName", "lastName", "email", "ticketType", "quantity")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?)(\d+)")

MIN_QUANTITY = 1
MAX_QUANTITY = 10


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def coerce_quantity(value: Any) -> Optional[int]:
    """Lenient integer parse: 3, 3.7, "3" and "3 tickets" all give 3.

    Returns None when the value is not a number at all. Strings with more
    significant digits than MAX_QUANTITY come back as MAX_QUANTITY + 1
    (keeping the sign).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if not match:
            return None
        sign = -1 if match.group(1) == "-" else 1
        digits = match.group(2).lstrip("0") or "0"
        # Long digit runs are out of range anyway; int() refuses very long ones.
        if len(digits) > len(str(MAX_QUANTITY)):
            return sign * (MAX_QUANTITY + 1)
        return sign * int(digits)
    return None


def validate(data: Mapping[str, Any]) -> Optional[ValidationFailure]:
    missing = [field for field in REQUIRED_FIELDS if is_missing(data.get(field))]
    if missing:
        return MissingFields(missing)

    if not EMAIL_RE.fullmatch(str(data["email"])):
        return InvalidEmail()

    quantity = coerce_quantity(data["quantity"])
    if quantity is None or not MIN_QUANTITY <= quantity <= MAX_QUANTITY:
        return InvalidQuantity()

    ticket_type = data["ticketType"]
    if not isinstance(ticket_type, str) or ticket_type not in TICKET_PRICES:
        return InvalidTicketType()

    return None
