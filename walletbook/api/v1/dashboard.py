"""
Dashboard API endpoints (aggregates and the historical balance series)
"""
from datetime import date as date_type, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from walletbook.api.deps import get_store
from walletbook.application.balance_history import BalanceHistoryQuery
from walletbook.application.dashboard import DashboardService
from walletbook.domain.errors import FinanceValidationError
from walletbook.infrastructure.store import FinanceStore


router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


class NamedAmount(BaseModel):
    name: str
    amount: str


class DailyFlowResponse(BaseModel):
    day: date_type
    label: str
    income: str
    expense: str


class RecentTransactionResponse(BaseModel):
    id: int
    date: date_type
    type: str
    amount: str
    description: str
    category_name: str
    wallet_name: str


class DashboardSummaryResponse(BaseModel):
    total_balance: str
    expense_by_category: list[NamedAmount]
    income_by_category: list[NamedAmount]
    wallet_distribution: list[NamedAmount]
    daily_flow: list[DailyFlowResponse]
    recent_transactions: list[RecentTransactionResponse]
    top_wallets: list[NamedAmount]


class BalancePointResponse(BaseModel):
    period_start: datetime
    label: str
    balance: str


def _named(items) -> list[NamedAmount]:
    return [NamedAmount(name=name, amount=str(amount)) for name, amount in items]


@router.get("/summary", response_model=DashboardSummaryResponse)
def summary(store: FinanceStore = Depends(get_store)):
    data = DashboardService(store).summary()
    return DashboardSummaryResponse(
        total_balance=str(data["total_balance"]),
        expense_by_category=_named(data["expense_by_category"].items()),
        income_by_category=_named(data["income_by_category"].items()),
        wallet_distribution=_named(data["wallet_distribution"]),
        daily_flow=[
            DailyFlowResponse(day=f.day, label=f.label, income=str(f.income), expense=str(f.expense))
            for f in data["daily_flow"]
        ],
        recent_transactions=[
            RecentTransactionResponse(
                id=t.id,
                date=t.date,
                type=t.type,
                amount=str(t.amount),
                description=t.description,
                category_name=t.category_name,
                wallet_name=t.wallet_name,
            )
            for t in data["recent_transactions"]
        ],
        top_wallets=_named((w.name, w.balance) for w in data["top_wallets"]),
    )


@router.get("/history", response_model=list[BalancePointResponse])
def history(cadence: str = "day", store: FinanceStore = Depends(get_store)):
    """Total balance per hour (24), day (30) or month (12), oldest first"""
    try:
        points = BalanceHistoryQuery(store).series(cadence)
    except ValueError as e:
        raise FinanceValidationError(str(e)) from e
    return [
        BalancePointResponse(period_start=p.period_start, label=p.label, balance=str(p.balance))
        for p in points
    ]
