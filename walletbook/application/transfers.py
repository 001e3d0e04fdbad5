"""
Transfer between two wallets.

A transfer is a fixed sequence of independent writes:

1. debit the source wallet
2. credit the destination wallet
3. expense transaction on the source
4. income transaction on the destination
5. balance snapshot (best effort)

Every precondition is checked before step 1. Steps 1-4 are required: if one
fails, the remaining steps are skipped and nothing already written is undone.
The raised TransferStepError lists the steps that stayed applied.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from walletbook.application.balance_history import RecordBalanceSnapshotUseCase
from walletbook.domain.errors import TransferValidationError, TransferStepError, WalletConflictError
from walletbook.domain.transaction import TRANSACTION_TYPE_EXPENSE, TRANSACTION_TYPE_INCOME
from walletbook.domain.wallet import WalletRecord
from walletbook.infrastructure.store import FinanceStore
from walletbook.utils.dates import local_today
from walletbook.utils.money import format_money
from walletbook.utils.validation import parse_amount, is_positive_amount

logger = logging.getLogger(__name__)

DEFAULT_TRANSFER_DESCRIPTION = "Transfer between wallets"

STEP_DEBIT_SOURCE = "debit_source"
STEP_CREDIT_DESTINATION = "credit_destination"
STEP_EXPENSE_TRANSACTION = "insert_expense_transaction"
STEP_INCOME_TRANSACTION = "insert_income_transaction"


@dataclass
class TransferResult:
    source: WalletRecord
    destination: WalletRecord
    amount: Decimal
    expense_transaction_id: int
    income_transaction_id: int
    snapshot_recorded: bool
    completed_steps: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Successfully transferred {format_money(self.amount)} "
            f"from {self.source.name} to {self.destination.name}"
        )


class TransferFundsUseCase:
    """
    Use case: move money from one wallet to another

    Example:
        source 1000, destination 500, amount 300
        -> source 700, destination 800, one expense and one income row
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def _validate(self, source_id: int, destination_id: int, amount) -> tuple[WalletRecord, WalletRecord, Decimal]:
        try:
            amount = parse_amount(amount)
        except ValueError as e:
            raise TransferValidationError("Please enter a valid amount") from e
        if not is_positive_amount(amount):
            raise TransferValidationError("Please enter a valid amount")

        if source_id == destination_id:
            raise TransferValidationError("Cannot transfer to the same wallet")

        source = self.store.find_cached_wallet(source_id)
        if source is None:
            raise TransferValidationError("Source wallet not found")
        destination = self.store.find_cached_wallet(destination_id)
        if destination is None:
            raise TransferValidationError("Destination wallet not found")

        if source.balance < amount:
            raise TransferValidationError("Insufficient balance in source wallet")

        return source, destination, amount

    def execute(
        self,
        source_id: int,
        destination_id: int,
        amount,
        description: str | None = None,
        today: date | None = None,
    ) -> TransferResult:
        """
        Transfer funds

        Args:
            source_id: Wallet to debit
            destination_id: Wallet to credit
            amount: Positive amount not above the source balance
            description: Base description of both legs
            today: Date of both legs, defaults to today in the configured timezone

        Raises:
            TransferValidationError: precondition failed, nothing written
            TransferStepError: a required write failed, earlier writes stay applied
        """
        source, destination, amount = self._validate(source_id, destination_id, amount)
        description = (description or "").strip() or DEFAULT_TRANSFER_DESCRIPTION
        tx_date = today or local_today()

        completed: list[str] = []

        def fail(step: str) -> TransferStepError:
            logger.error(
                "Transfer %s -> %s of %s failed at %s; applied steps: %s",
                source.id, destination.id, amount, step, ", ".join(completed) or "none",
            )
            return TransferStepError("transfer", step, completed, "Failed to transfer funds")

        try:
            new_source = self.store.set_wallet_balance(source, source.balance - amount)
        except (SQLAlchemyError, WalletConflictError) as e:
            raise fail(STEP_DEBIT_SOURCE) from e
        completed.append(STEP_DEBIT_SOURCE)

        try:
            new_destination = self.store.set_wallet_balance(destination, destination.balance + amount)
        except (SQLAlchemyError, WalletConflictError) as e:
            raise fail(STEP_CREDIT_DESTINATION) from e
        completed.append(STEP_CREDIT_DESTINATION)

        try:
            expense = self.store.create_transaction(
                amount=amount,
                transaction_type=TRANSACTION_TYPE_EXPENSE,
                wallet_id=source.id,
                tx_date=tx_date,
                description=f"{description} (Transfer to {destination.name})",
            )
        except SQLAlchemyError as e:
            raise fail(STEP_EXPENSE_TRANSACTION) from e
        completed.append(STEP_EXPENSE_TRANSACTION)
        expense_id = expense.id

        try:
            income = self.store.create_transaction(
                amount=amount,
                transaction_type=TRANSACTION_TYPE_INCOME,
                wallet_id=destination.id,
                tx_date=tx_date,
                description=f"{description} (Transfer from {source.name})",
            )
        except SQLAlchemyError as e:
            raise fail(STEP_INCOME_TRANSACTION) from e
        completed.append(STEP_INCOME_TRANSACTION)
        income_id = income.id

        snapshot_recorded = RecordBalanceSnapshotUseCase(self.store).execute()

        logger.info("Transferred %s from wallet %s to wallet %s", amount, source.id, destination.id)
        return TransferResult(
            source=new_source,
            destination=new_destination,
            amount=amount,
            expense_transaction_id=expense_id,
            income_transaction_id=income_id,
            snapshot_recorded=snapshot_recorded,
            completed_steps=list(completed),
        )
