"""
Transaction use cases - adding, deleting and listing income/expense rows

Adding and deleting touch two rows (the transaction and its wallet). The
writes are independent commits made in a fixed order; when a later step
fails the earlier ones stay applied.
"""
import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from walletbook.application.balance_history import RecordBalanceSnapshotUseCase
from walletbook.domain.errors import (
    TransactionValidationError,
    TransactionStepError,
    NotFoundError,
    WalletConflictError,
)
from walletbook.domain.transaction import TRANSACTION_TYPES, apply_to_balance, reverse_from_balance
from walletbook.infrastructure.db.models import Transaction
from walletbook.infrastructure.store import FinanceStore
from walletbook.utils.dates import local_today
from walletbook.utils.validation import parse_amount, is_positive_amount

logger = logging.getLogger(__name__)

STEP_INSERT_TRANSACTION = "insert_transaction"
STEP_UPDATE_BALANCE = "update_wallet_balance"
STEP_DELETE_TRANSACTION = "delete_transaction"


@dataclass
class AddTransactionResult:
    transaction: Transaction
    snapshot_recorded: bool


class CreateTransactionUseCase:
    """
    Use case: record an income or expense

    Steps:
    1. Insert the transaction row
    2. Set wallet balance = old ± amount (compare-and-swap)
    3. Append a balance snapshot (best effort)
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def execute(
        self,
        amount,
        transaction_type: str,
        wallet_id: int,
        category_id: int | None = None,
        description: str = "",
        tx_date: date | None = None,
    ) -> AddTransactionResult:
        """
        Add a transaction

        Args:
            amount: Positive amount (str / number)
            transaction_type: income or expense
            wallet_id: Wallet the money goes into / comes out of
            category_id: Optional category
            description: Free text
            tx_date: Calendar date, defaults to today in the configured timezone

        Returns:
            The stored transaction and whether the snapshot was recorded

        Raises:
            TransactionValidationError: bad input, nothing written
            TransactionStepError: a write failed, earlier writes stay applied
        """
        try:
            amount = parse_amount(amount)
        except ValueError as e:
            raise TransactionValidationError(f"Invalid amount: {e}") from e
        if not is_positive_amount(amount):
            raise TransactionValidationError("Amount must be greater than zero")

        if transaction_type not in TRANSACTION_TYPES:
            raise TransactionValidationError(
                f"Invalid transaction type: {transaction_type}. Use income or expense"
            )

        wallet = self.store.find_cached_wallet(wallet_id)
        if wallet is None:
            raise TransactionValidationError(f"Wallet #{wallet_id} not found")

        # Category type is expected to match the transaction type but is not enforced
        if category_id is not None and self.store.get_category(category_id) is None:
            raise TransactionValidationError(f"Category #{category_id} not found")

        completed: list[str] = []
        try:
            tx = self.store.create_transaction(
                amount=amount,
                transaction_type=transaction_type,
                wallet_id=wallet.id,
                tx_date=tx_date or local_today(),
                description=(description or "").strip(),
                category_id=category_id,
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to add transaction: insert failed")
            raise TransactionStepError(
                "add_transaction", STEP_INSERT_TRANSACTION, completed, "Failed to add transaction"
            ) from e
        completed.append(STEP_INSERT_TRANSACTION)
        tx_id = tx.id

        try:
            self.store.set_wallet_balance(wallet, apply_to_balance(wallet.balance, transaction_type, amount))
        except (SQLAlchemyError, WalletConflictError) as e:
            logger.exception(
                "Failed to add transaction: balance of wallet %s not updated after inserting transaction %s",
                wallet.id, tx_id,
            )
            raise TransactionStepError(
                "add_transaction", STEP_UPDATE_BALANCE, completed, "Failed to add transaction"
            ) from e

        snapshot_recorded = RecordBalanceSnapshotUseCase(self.store).execute()
        logger.info("Added %s transaction %s of %s to wallet %s", transaction_type, tx_id, amount, wallet.id)
        return AddTransactionResult(transaction=tx, snapshot_recorded=snapshot_recorded)


class DeleteTransactionUseCase:
    """
    Use case: delete a transaction and undo its effect on the wallet

    Steps:
    1. Compensate the wallet balance (income: - amount, expense: + amount)
    2. Delete the row

    A transaction whose wallet no longer exists is deleted without adjustment.
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def execute(self, transaction_id: int) -> None:
        tx = self.store.get_transaction(transaction_id)
        if tx is None:
            raise NotFoundError(f"Transaction #{transaction_id} not found")

        completed: list[str] = []
        wallet = self.store.find_cached_wallet(tx.wallet_id)
        if wallet is not None:
            try:
                self.store.set_wallet_balance(wallet, reverse_from_balance(wallet.balance, tx.type, tx.amount))
            except (SQLAlchemyError, WalletConflictError) as e:
                logger.exception("Failed to delete transaction %s: balance not compensated", transaction_id)
                raise TransactionStepError(
                    "delete_transaction", STEP_UPDATE_BALANCE, completed, "Failed to delete transaction"
                ) from e
            completed.append(STEP_UPDATE_BALANCE)
        else:
            logger.warning("Transaction %s references missing wallet %s; deleting without adjustment",
                           transaction_id, tx.wallet_id)

        try:
            self.store.delete_transaction(transaction_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to delete transaction %s after balance compensation", transaction_id)
            raise TransactionStepError(
                "delete_transaction", STEP_DELETE_TRANSACTION, completed, "Failed to delete transaction"
            ) from e


def default_period(today: date | None = None) -> tuple[date, date]:
    """Transactions page default range: first day of the current month .. today"""
    today = today or local_today()
    return today.replace(day=1), today


def list_transactions(
    store: FinanceStore,
    transaction_type: str | None = None,
    wallet_id: int | None = None,
    category_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    order_by: str = "date",
    limit: int | None = None,
) -> list[Transaction]:
    if transaction_type is not None and transaction_type not in TRANSACTION_TYPES:
        raise TransactionValidationError(
            f"Invalid transaction type: {transaction_type}. Use income or expense"
        )
    if order_by not in ("date", "created_at"):
        raise TransactionValidationError("order_by must be date or created_at")
    if start_date and end_date and start_date > end_date:
        raise TransactionValidationError("start_date is after end_date")
    return store.list_transactions(
        transaction_type=transaction_type,
        wallet_id=wallet_id,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        order_by=order_by,
        limit=limit,
    )
