"""
Dashboard aggregates computed over rows fetched from the store
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from walletbook.domain.transaction import TRANSACTION_TYPE_EXPENSE, TRANSACTION_TYPE_INCOME
from walletbook.domain.wallet import WalletRecord, total_balance
from walletbook.infrastructure.store import FinanceStore, WALLET_ORDER_BALANCE
from walletbook.utils.dates import local_today

UNKNOWN_CATEGORY = "Unknown"
UNKNOWN_WALLET = "Unknown"


@dataclass(frozen=True)
class DailyFlow:
    day: date
    label: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class RecentTransaction:
    id: int
    date: date
    type: str
    amount: Decimal
    description: str
    category_name: str
    wallet_name: str


class DashboardService:
    """
    Aggregates for the dashboard page

    Usage:
        service = DashboardService(store)
        summary = service.summary()
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def total_balance(self) -> Decimal:
        return total_balance(self.store.list_wallets())

    def category_breakdown(self, transaction_type: str, today: date | None = None) -> dict[str, Decimal]:
        """Sum per category name over this month's transactions of one type"""
        today = today or local_today()
        names = {c.id: c.name for c in self.store.list_categories()}
        rows = self.store.list_transactions(
            transaction_type=transaction_type,
            start_date=today.replace(day=1),
            end_date=today,
        )
        totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for tx in rows:
            totals[names.get(tx.category_id, UNKNOWN_CATEGORY)] += Decimal(tx.amount)
        return dict(totals)

    def wallet_distribution(self) -> list[tuple[str, Decimal]]:
        return [(w.name, w.balance) for w in self.store.list_wallets()]

    def daily_flow(self, days: int = 7, today: date | None = None) -> list[DailyFlow]:
        """Income and expense totals per day, oldest first, ending today"""
        today = today or local_today()
        first = today - timedelta(days=days - 1)
        rows = self.store.list_transactions(start_date=first, end_date=today)

        buckets = {first + timedelta(days=i): [Decimal("0"), Decimal("0")] for i in range(days)}
        for tx in rows:
            bucket = buckets.get(tx.date)
            if bucket is None:
                continue
            if tx.type == TRANSACTION_TYPE_INCOME:
                bucket[0] += Decimal(tx.amount)
            elif tx.type == TRANSACTION_TYPE_EXPENSE:
                bucket[1] += Decimal(tx.amount)

        return [
            DailyFlow(day=day, label=day.strftime("%a"), income=income, expense=expense)
            for day, (income, expense) in buckets.items()
        ]

    def recent_transactions(self, limit: int = 5) -> list[RecentTransaction]:
        categories = {c.id: c.name for c in self.store.list_categories()}
        wallets = {w.id: w.name for w in self.store.list_wallets()}
        rows = self.store.list_transactions(order_by="created_at", limit=limit)
        return [
            RecentTransaction(
                id=tx.id,
                date=tx.date,
                type=tx.type,
                amount=Decimal(tx.amount),
                description=tx.description,
                category_name=categories.get(tx.category_id, UNKNOWN_CATEGORY),
                wallet_name=wallets.get(tx.wallet_id, UNKNOWN_WALLET),
            )
            for tx in rows
        ]

    def top_wallets(self, limit: int = 3) -> list[WalletRecord]:
        return self.store.list_wallets(WALLET_ORDER_BALANCE)[:limit]

    def summary(self, today: date | None = None) -> dict:
        today = today or local_today()
        return {
            "total_balance": self.total_balance(),
            "expense_by_category": self.category_breakdown(TRANSACTION_TYPE_EXPENSE, today),
            "income_by_category": self.category_breakdown(TRANSACTION_TYPE_INCOME, today),
            "wallet_distribution": self.wallet_distribution(),
            "daily_flow": self.daily_flow(7, today),
            "recent_transactions": self.recent_transactions(5),
            "top_wallets": self.top_wallets(3),
        }
