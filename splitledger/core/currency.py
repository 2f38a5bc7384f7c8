from decimal import Decimal
from babel.numbers import format_currency as babel_format_currency, format_decimal, list_currencies
from splitledger.core.config import settings
from splitledger.core.utils import qround, to_dec

def format_currency(amount, currency_code: str) -> str:
    """Locale-aware rendering, e.g. -$1,234.50 or ¥12 for en_US."""
    value = qround(to_dec(amount))
    code = currency_code.upper()

    if code not in list_currencies():
        sign = "-" if value < 0 else ""
        digits = format_decimal(abs(value), format="#,##0.00", locale=settings.CURRENCY_LOCALE)
        return f"{sign}{code} {digits}"

    return babel_format_currency(value, code, locale=settings.CURRENCY_LOCALE)

def toggle_currency(current: str) -> str:
    first, second = settings.SUPPORTED_CURRENCIES
    return second if current == first else first

def is_settled(amount: Decimal) -> bool:
    return abs(to_dec(amount)) < settings.SETTLED_EPSILON
