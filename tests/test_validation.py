import pytest

from errors import InvalidEmail, InvalidQuantity, InvalidTicketType, MissingFields
from validation import coerce_quantity, validate

pytestmark = pytest.mark.unit


def test_valid_body_passes(valid_body):
    assert validate(valid_body) is None


def test_missing_fields_are_all_reported_in_order():
    error = validate({"email": "ann@example.com", "quantity": 1})
    assert isinstance(error, MissingFields)
    assert error.fields == ["firstName", "lastName", "ticketType"]
    assert error.message == "Missing required fields: firstName, lastName, ticketType"


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_blank_values_count_as_missing(valid_body, blank):
    valid_body["lastName"] = blank
    error = validate(valid_body)
    assert isinstance(error, MissingFields)
    assert error.fields == ["lastName"]


def test_missing_fields_checked_before_email(valid_body):
    valid_body["email"] = "not-an-email"
    del valid_body["firstName"]
    assert isinstance(validate(valid_body), MissingFields)


@pytest.mark.parametrize(
    "email",
    ["ann", "ann@example", "@example.com", "ann@.com", "ann lee@example.com", "ann@example.com\n"],
)
def test_invalid_email(valid_body, email):
    valid_body["email"] = email
    error = validate(valid_body)
    assert isinstance(error, InvalidEmail)
    assert error.message == "Invalid email format"


def test_email_checked_before_quantity_and_ticket_type(valid_body):
    valid_body.update(email="bad", quantity=50, ticketType="backstage")
    assert isinstance(validate(valid_body), InvalidEmail)


@pytest.mark.parametrize(
    "quantity",
    [0, -1, 11, 100, "abc", "0", "11", "100", "9" * 5000, "-" + "9" * 5000, 10.9 + 1, True, [2]],
)
def test_quantity_outside_bounds_or_not_numeric(valid_body, quantity):
    valid_body["quantity"] = quantity
    error = validate(valid_body)
    assert isinstance(error, InvalidQuantity)
    assert "between 1 and 10" in error.message


def test_quantity_checked_before_ticket_type(valid_body):
    valid_body.update(quantity=11, ticketType="backstage")
    assert isinstance(validate(valid_body), InvalidQuantity)


@pytest.mark.parametrize("quantity", [1, 10, "3", " 4 ", "5 tickets", 7.9, "0" * 5000 + "5", "010"])
def test_quantity_accepted_after_coercion(valid_body, quantity):
    valid_body["quantity"] = quantity
    assert validate(valid_body) is None


@pytest.mark.parametrize("ticket_type", ["VIP", "platinum", "general ", 1, ["vip"]])
def test_invalid_ticket_type(valid_body, ticket_type):
    valid_body["ticketType"] = ticket_type
    error = validate(valid_body)
    assert isinstance(error, InvalidTicketType)
    assert error.message == "Invalid ticket type"


@pytest.mark.parametrize(
    "value,expected",
    [
        (3, 3),
        (3.7, 3),
        (-2.5, -2),
        ("8", 8),
        ("+2", 2),
        ("-1", -1),
        ("12abc", 12),
        ("0007", 7),
        ("123", 11),
        ("-123", -11),
        ("9" * 5000, 11),
        ("0" * 5000, 0),
        ("abc", None),
        ("", None),
        (float("nan"), None),
        (float("inf"), None),
        (False, None),
        (None, None),
        ({"n": 1}, None),
    ],
)
def test_coerce_quantity(value, expected):
    assert coerce_quantity(value) == expected
