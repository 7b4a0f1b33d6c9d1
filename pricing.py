from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

TICKET_PRICES = {
    "general": 49,
    "vip": 129,
    "student": 29,
}

TAX_RATE = Decimal("0.08")


class Quote(NamedTuple):
    subtotal: int
    tax: int
    total: int


def round_half_up(amount: Decimal) -> int:
    """Round to the nearest integer, .5 going up (away from zero for positives)."""
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price(ticket_type: str, quantity: int) -> Quote:
    """Price `quantity` tickets of `ticket_type`.

    The ticket type must already be validated; an unknown type raises KeyError.
    """
    subtotal = TICKET_PRICES[ticket_type] * quantity
    tax = round_half_up(Decimal(subtotal) * TAX_RATE)
    return Quote(subtotal=subtotal, tax=tax, total=subtotal + tax)
