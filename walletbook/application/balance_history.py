"""
Balance snapshots and the historical balance chart
"""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from walletbook.domain.balance_history import BalancePoint, get_cadence, reconstruct_balance_series
from walletbook.domain.wallet import total_balance
from walletbook.infrastructure.store import FinanceStore
from walletbook.utils.dates import local_now

logger = logging.getLogger(__name__)


class RecordBalanceSnapshotUseCase:
    """
    Use case: append the current total of all wallets to balance history

    Runs as the last step of flows that change balances. It is best effort: a
    failure is logged and reported through the return value, never raised.
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def execute(self, timestamp: datetime | None = None) -> bool:
        try:
            total = self.store.sum_wallet_balances()
            self.store.append_balance_snapshot(total, timestamp)
        except SQLAlchemyError:
            logger.exception("Failed to record balance snapshot")
            return False
        return True


class BalanceHistoryQuery:
    """Read side for the balance chart"""

    def __init__(self, store: FinanceStore):
        self.store = store

    def series(self, cadence: str = "day", now: datetime | None = None) -> list[BalancePoint]:
        """
        Total balance per period for the chart

        Args:
            cadence: hour (24 points), day (30 points) or month (12 points)
            now: Reference time, defaults to now in the configured timezone

        Raises:
            ValueError: unknown cadence
        """
        resolved = get_cadence(cadence)
        history = self.store.list_balance_history()
        transactions = [] if history else self.store.list_transactions()
        return reconstruct_balance_series(
            resolved,
            now or local_now(),
            history,
            transactions,
            total_balance(self.store.list_wallets()),
        )
