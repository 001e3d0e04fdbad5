"""
Tests for dashboard aggregates and the balance history query
"""
from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from walletbook.application.balance_history import BalanceHistoryQuery, RecordBalanceSnapshotUseCase
from walletbook.application.dashboard import DashboardService

TODAY = date(2024, 3, 20)


@pytest.fixture
def seeded(store):
    cash = store.create_wallet("Cash", Decimal("1000"))
    bank = store.create_wallet("Bank", Decimal("5000"))
    card = store.create_wallet("Card", Decimal("-200"))
    savings = store.create_wallet("Savings", Decimal("3000"))
    food = store.create_category("Food", "expense")
    salary = store.create_category("Salary", "income")

    store.create_transaction(Decimal("50"), "expense", cash.id, date(2024, 3, 20), "Lunch", food.id)
    store.create_transaction(Decimal("25"), "expense", cash.id, date(2024, 3, 14), "Snack", food.id)
    store.create_transaction(Decimal("70"), "expense", bank.id, date(2024, 3, 18), "Taxi")
    store.create_transaction(Decimal("4000"), "income", bank.id, date(2024, 3, 1), "March salary", salary.id)
    store.create_transaction(Decimal("999"), "expense", bank.id, date(2024, 2, 28), "Last month", food.id)
    store.create_transaction(Decimal("15"), "expense", 4242, date(2024, 3, 19), "Deleted wallet")
    return {"cash": cash, "bank": bank, "card": card, "savings": savings}


def test_total_balance(store, seeded):
    assert DashboardService(store).total_balance() == Decimal("8800")


def test_category_breakdown_current_month(store, seeded):
    service = DashboardService(store)

    expenses = service.category_breakdown("expense", TODAY)
    assert expenses == {"Food": Decimal("75"), "Unknown": Decimal("85")}

    income = service.category_breakdown("income", TODAY)
    assert income == {"Salary": Decimal("4000")}


def test_daily_flow_last_seven_days(store, seeded):
    flow = DashboardService(store).daily_flow(7, TODAY)

    assert [f.day for f in flow] == [date(2024, 3, d) for d in range(14, 21)]
    by_day = {f.day.day: f for f in flow}
    assert by_day[14].expense == Decimal("25")
    assert by_day[18].expense == Decimal("70")
    assert by_day[20].expense == Decimal("50")
    assert by_day[16].income == Decimal("0")
    assert by_day[20].label == "Wed"


def test_recent_transactions_with_names(store, seeded):
    recent = DashboardService(store).recent_transactions(5)

    assert len(recent) == 5
    # Newest insert first
    assert recent[0].description == "Deleted wallet"
    assert recent[0].wallet_name == "Unknown"
    assert recent[0].category_name == "Unknown"
    assert recent[-1].description == "Snack"
    assert recent[-1].wallet_name == "Cash"
    assert recent[-1].category_name == "Food"


def test_top_wallets_and_distribution(store, seeded):
    service = DashboardService(store)

    assert [w.name for w in service.top_wallets(3)] == ["Bank", "Savings", "Cash"]
    assert dict(service.wallet_distribution()) == {
        "Cash": Decimal("1000"),
        "Bank": Decimal("5000"),
        "Card": Decimal("-200"),
        "Savings": Decimal("3000"),
    }


def test_summary_on_empty_store(store):
    summary = DashboardService(store).summary(TODAY)

    assert summary["total_balance"] == Decimal("0")
    assert summary["expense_by_category"] == {}
    assert len(summary["daily_flow"]) == 7
    assert summary["recent_transactions"] == []
    assert summary["top_wallets"] == []


def test_history_replays_transactions_without_snapshots(store):
    wallet = store.create_wallet("Cash", Decimal("1000"))
    store.create_transaction(Decimal("200"), "income", wallet.id, date(2024, 3, 30))

    now = datetime(2024, 3, 30, 12, 0, tzinfo=ZoneInfo("Asia/Jakarta"))
    points = BalanceHistoryQuery(store).series("day", now)

    assert len(points) == 30
    assert points[-1].balance == Decimal("1000")
    assert points[-2].balance == Decimal("800")


def test_history_uses_recorded_snapshots(store):
    store.create_wallet("Cash", Decimal("1000"))
    assert RecordBalanceSnapshotUseCase(store).execute(datetime(2024, 3, 29, 1, 0, tzinfo=timezone.utc)) is True

    now = datetime(2024, 3, 30, 12, 0, tzinfo=ZoneInfo("Asia/Jakarta"))
    points = BalanceHistoryQuery(store).series("day", now)

    assert points[-1].balance == Decimal("1000")
    assert points[-2].balance == Decimal("1000")
    assert points[-3].balance == Decimal("0")


def test_history_unknown_cadence(store):
    with pytest.raises(ValueError):
        BalanceHistoryQuery(store).series("week")
