"""
Category domain entity
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from walletbook.domain.transaction import TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE

CATEGORY_TYPE_INCOME = TRANSACTION_TYPE_INCOME
CATEGORY_TYPE_EXPENSE = TRANSACTION_TYPE_EXPENSE
CATEGORY_TYPES = (CATEGORY_TYPE_INCOME, CATEGORY_TYPE_EXPENSE)


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    name: str
    type: str  # income/expense
    created_at: datetime | None = None


def filter_by_type(categories: Iterable[CategoryRecord], category_type: str | None) -> list[CategoryRecord]:
    """
    Categories offered by the add-transaction form for the selected type

    A None type returns everything.
    """
    if category_type is None:
        return list(categories)
    return [c for c in categories if c.type == category_type]
