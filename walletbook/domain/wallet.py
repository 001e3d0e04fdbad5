"""
Wallet domain entity
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable


@dataclass(frozen=True)
class WalletRecord:
    """
    Immutable view of a wallet row.

    Safe to share between requests through the store cache. `version` is the
    value the row had when it was read; balance writes compare against it.
    """
    id: int
    name: str
    balance: Decimal
    version: int
    created_at: datetime | None = None


def total_balance(wallets: Iterable[WalletRecord]) -> Decimal:
    """Arithmetic sum of every wallet's balance (0 for no wallets)"""
    return sum((Decimal(w.balance) for w in wallets), Decimal("0"))
