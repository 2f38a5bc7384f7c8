from decimal import Decimal
import pytest
from splitledger.core.currency import format_currency, toggle_currency, is_settled


@pytest.mark.parametrize(
    "amount, code, expected",
    [
        (Decimal("1234.5"), "USD", "$1,234.50"),
        (Decimal("1234.5"), "INR", "₹1,234.50"),
        (Decimal("-5"), "USD", "-$5.00"),
        (Decimal("0.005"), "usd", "$0.01"),
        (Decimal("3.5"), "EUR", "€3.50"),
        (12, "JPY", "¥12"),
        (Decimal("1234.5"), "XYZ", "XYZ 1,234.50"),
        (Decimal("-7"), "XYZ", "-XYZ 7.00"),
    ],
)
def test_format_currency(amount, code, expected):
    assert format_currency(amount, code) == expected


def test_unknown_code_uses_plain_space():
    assert "\xa0" not in format_currency(12, "XYZ")


def test_toggle_currency():
    assert toggle_currency("INR") == "USD"
    assert toggle_currency("USD") == "INR"
    assert toggle_currency("EUR") == "INR"


def test_is_settled():
    assert is_settled(Decimal("0"))
    assert is_settled(Decimal("-0.004"))
    assert not is_settled(Decimal("0.01"))
    assert not is_settled(Decimal("-12"))
