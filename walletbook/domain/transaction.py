"""
Transaction sign rules.

Amounts are stored positive; the effect on a wallet balance comes from the
transaction type.
"""
from decimal import Decimal

TRANSACTION_TYPE_INCOME = "income"
TRANSACTION_TYPE_EXPENSE = "expense"
TRANSACTION_TYPES = (TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE)


def signed_amount(transaction_type: str, amount: Decimal) -> Decimal:
    """
    Signed effect of a transaction on its wallet

    Example:
        >>> signed_amount("income", Decimal("100"))
        Decimal('100')
        >>> signed_amount("expense", Decimal("100"))
        Decimal('-100')
    """
    if transaction_type == TRANSACTION_TYPE_INCOME:
        return Decimal(amount)
    if transaction_type == TRANSACTION_TYPE_EXPENSE:
        return -Decimal(amount)
    raise ValueError(f"Unknown transaction type: {transaction_type!r}")


def apply_to_balance(balance: Decimal, transaction_type: str, amount: Decimal) -> Decimal:
    """Balance after the transaction has happened"""
    return Decimal(balance) + signed_amount(transaction_type, amount)


def reverse_from_balance(balance: Decimal, transaction_type: str, amount: Decimal) -> Decimal:
    """Balance with the transaction's effect removed (delete, history replay)"""
    return Decimal(balance) - signed_amount(transaction_type, amount)
