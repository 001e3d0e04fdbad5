"""
Wallet use cases - business logic for wallet operations
"""
import logging
from decimal import Decimal

from walletbook.application.balance_history import RecordBalanceSnapshotUseCase
from walletbook.domain.errors import WalletValidationError, NotFoundError
from walletbook.domain.wallet import WalletRecord, total_balance
from walletbook.infrastructure.store import FinanceStore, WALLET_ORDERS
from walletbook.utils.validation import parse_amount

logger = logging.getLogger(__name__)

MAX_WALLET_NAME_LENGTH = 255


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise WalletValidationError("Wallet name is required")
    if len(name) > MAX_WALLET_NAME_LENGTH:
        raise WalletValidationError(f"Wallet name is longer than {MAX_WALLET_NAME_LENGTH} characters")
    return name


class CreateWalletUseCase:
    """
    Use case: create a wallet with an opening balance

    The opening balance may be zero or negative; no transaction is recorded
    for it.
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def execute(self, name: str, initial_balance="0") -> WalletRecord:
        """
        Create a wallet

        Args:
            name: Display name
            initial_balance: Opening balance (str / number), defaults to 0

        Returns:
            The stored wallet
        """
        name = _clean_name(name)
        try:
            balance = parse_amount(initial_balance if initial_balance not in (None, "") else "0")
        except ValueError as e:
            raise WalletValidationError(f"Invalid initial balance: {e}") from e

        wallet = self.store.create_wallet(name, balance)
        logger.info("Created wallet %s (%s) with balance %s", wallet.id, wallet.name, wallet.balance)

        RecordBalanceSnapshotUseCase(self.store).execute()
        return wallet


class RenameWalletUseCase:
    def __init__(self, store: FinanceStore):
        self.store = store

    def execute(self, wallet_id: int, name: str) -> WalletRecord:
        name = _clean_name(name)
        wallet = self.store.rename_wallet(wallet_id, name)
        if wallet is None:
            raise NotFoundError(f"Wallet #{wallet_id} not found")
        return wallet


class DeleteWalletUseCase:
    """
    Use case: delete a wallet

    Only wallets without transactions can be deleted.
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def execute(self, wallet_id: int) -> None:
        if self.store.get_wallet(wallet_id) is None:
            raise NotFoundError(f"Wallet #{wallet_id} not found")

        if self.store.count_wallet_transactions(wallet_id) > 0:
            raise WalletValidationError(
                "Cannot delete wallet with transactions. Please delete all transactions first."
            )

        self.store.delete_wallet(wallet_id)
        logger.info("Deleted wallet %s", wallet_id)


def list_wallets(store: FinanceStore, order: str = "created_at") -> list[WalletRecord]:
    if order not in WALLET_ORDERS:
        raise WalletValidationError(
            f"Unknown order {order!r}, expected one of: {', '.join(WALLET_ORDERS)}"
        )
    return store.list_wallets(order)


def get_total_balance(store: FinanceStore) -> Decimal:
    """Sum of all wallet balances as currently loaded"""
    return total_balance(store.list_wallets())
