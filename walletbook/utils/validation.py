"""
Amount parsing for user input

Amounts come from JSON and forms as strings ("1500", "99,50") or as plain
numbers. Comma and dot are both accepted as the decimal separator.
"""
import re
from decimal import Decimal

MAX_DECIMAL_PLACES = 2

# Optional minus, digits, optional fraction. No exponent, NaN or Infinity.
_PLAIN_DECIMAL = re.compile(r"^-?\d+(?:\.(\d+))?$")


def parse_amount(value, max_decimal_places: int = MAX_DECIMAL_PLACES) -> Decimal:
    """
    Convert an amount (str / int / float / Decimal) to Decimal

    Example:
        >>> parse_amount("99,50")
        Decimal('99.50')
        >>> parse_amount("100.505")
        Traceback (most recent call last):
        ValueError: at most 2 decimal places

    Raises:
        ValueError: not a plain decimal number, or too many decimal places
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError("not a plain decimal number")
        text = format(value, "f")
    else:
        text = str(value).strip().replace(",", ".")

    match = _PLAIN_DECIMAL.match(text)
    if match is None:
        raise ValueError("not a plain decimal number")
    fraction = match.group(1)
    if fraction is not None and len(fraction) > max_decimal_places:
        raise ValueError(f"at most {max_decimal_places} decimal places")
    return Decimal(text)


def is_positive_amount(amount: Decimal) -> bool:
    """Finite and strictly greater than zero"""
    return amount.is_finite() and amount > 0
