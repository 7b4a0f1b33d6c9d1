import secrets
import string
import time
from datetime import datetime, timezone
from typing import Optional

BASE36_ALPHABET = string.digits + string.ascii_uppercase
RANDOM_SUFFIX_LENGTH = 5


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_registration_id(now_ms: Optional[int] = None) -> str:
    """Return an id like ``EVT-LZ3K2P1Q-7F0XA``.

    Uniqueness is probabilistic (millisecond timestamp plus five random
    characters). Nothing checks the store for an existing id.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f"EVT-{to_base36(now_ms)}-{suffix}".upper()


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
