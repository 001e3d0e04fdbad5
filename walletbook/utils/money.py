"""
Money formatting for pages and flash messages.

Usage:
    from walletbook.utils.money import format_money

    format_money(1500000)          -> "Rp 1.500.000"
    format_money(300, "Rp")        -> "Rp 300"
    format_money(-2500.5, "Rp", 2) -> "-Rp 2.500,50"
"""
from decimal import Decimal

from walletbook.config import get_settings


def format_money(amount, label: str | None = None, decimals: int = 0) -> str:
    """
    Format an amount with dot thousands separators and a leading currency label.

    Args:
        amount: number (int / float / Decimal / str)
        label: currency label, defaults to CURRENCY_LABEL from settings
        decimals: digits after the decimal comma

    Returns:
        "Rp 1.500.000"
    """
    if label is None:
        label = get_settings().CURRENCY_LABEL
    amount = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount

    sign = "-" if amount < 0 else ""
    fmt = f"{{:,.{decimals}f}}"
    # 1,234.50 -> 1.234,50
    formatted = fmt.format(abs(amount)).replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{label} {formatted}"
