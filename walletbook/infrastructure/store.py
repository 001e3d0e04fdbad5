"""
Data access for wallets, categories, transactions and balance snapshots.

Every write commits on its own: a multi-step flow built from these calls is
not atomic, and a failure part way leaves the earlier steps applied.

Wallet and category lists are served from FinanceCache. Any write through
FinanceStore invalidates the affected list so the next read goes back to the
database.
"""
import logging
import threading
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from walletbook.domain.category import CategoryRecord, filter_by_type
from walletbook.domain.errors import WalletConflictError
from walletbook.domain.wallet import WalletRecord
from walletbook.infrastructure.db.models import Wallet, Category, Transaction, BalanceHistory
from walletbook.utils.dates import utc_now

logger = logging.getLogger(__name__)

WALLET_ORDER_CREATED = "created_at"
WALLET_ORDER_NAME = "name"
WALLET_ORDER_BALANCE = "balance"
WALLET_ORDERS = (WALLET_ORDER_CREATED, WALLET_ORDER_NAME, WALLET_ORDER_BALANCE)


class FinanceCache:
    """
    Process-wide cache of wallet and category rows.

    Holds immutable records only, so a cached list can be handed to any
    request. Lives on app.state and is shared by every FinanceStore.

    Each list has a generation number bumped on invalidation. A reader takes
    the generation before its SELECT and passes it to put_*; a list loaded
    before a later invalidation is not stored.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._wallets: tuple[WalletRecord, ...] | None = None
        self._wallets_generation = 0
        self._categories: tuple[CategoryRecord, ...] | None = None
        self._categories_generation = 0

    def get_wallets(self) -> tuple[WalletRecord, ...] | None:
        with self._lock:
            return self._wallets

    def wallets_generation(self) -> int:
        with self._lock:
            return self._wallets_generation

    def put_wallets(self, wallets, generation: int) -> bool:
        with self._lock:
            if generation != self._wallets_generation:
                return False
            self._wallets = tuple(wallets)
            return True

    def invalidate_wallets(self) -> None:
        with self._lock:
            self._wallets = None
            self._wallets_generation += 1

    def get_categories(self) -> tuple[CategoryRecord, ...] | None:
        with self._lock:
            return self._categories

    def categories_generation(self) -> int:
        with self._lock:
            return self._categories_generation

    def put_categories(self, categories, generation: int) -> bool:
        with self._lock:
            if generation != self._categories_generation:
                return False
            self._categories = tuple(categories)
            return True

    def invalidate_categories(self) -> None:
        with self._lock:
            self._categories = None
            self._categories_generation += 1


def _wallet_record(wallet: Wallet) -> WalletRecord:
    return WalletRecord(
        id=wallet.id,
        name=wallet.name,
        balance=Decimal(wallet.balance),
        version=wallet.version,
        created_at=wallet.created_at,
    )


def _category_record(category: Category) -> CategoryRecord:
    return CategoryRecord(
        id=category.id,
        name=category.name,
        type=category.type,
        created_at=category.created_at,
    )


def _sort_wallets(wallets, order: str) -> list[WalletRecord]:
    if order == WALLET_ORDER_NAME:
        return sorted(wallets, key=lambda w: (w.name.lower(), w.id))
    if order == WALLET_ORDER_BALANCE:
        return sorted(wallets, key=lambda w: (w.balance, w.id), reverse=True)
    if order == WALLET_ORDER_CREATED:
        # Newest first
        return sorted(wallets, key=lambda w: w.id, reverse=True)
    raise ValueError(f"Unknown wallet order {order!r}, expected one of: {', '.join(WALLET_ORDERS)}")


class FinanceStore:
    """Single-session gateway to the finance tables"""

    def __init__(self, db: Session, cache: FinanceCache):
        self.db = db
        self.cache = cache

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # --- wallets -----------------------------------------------------------

    def list_wallets(self, order: str = WALLET_ORDER_CREATED) -> list[WalletRecord]:
        wallets = self.cache.get_wallets()
        if wallets is None:
            generation = self.cache.wallets_generation()
            rows = self.db.scalars(select(Wallet)).all()
            wallets = [_wallet_record(w) for w in rows]
            self.cache.put_wallets(wallets, generation)
        return _sort_wallets(wallets, order)

    def find_cached_wallet(self, wallet_id: int) -> WalletRecord | None:
        """Wallet from the currently loaded set (may be stale)"""
        for wallet in self.list_wallets():
            if wallet.id == wallet_id:
                return wallet
        return None

    def get_wallet(self, wallet_id: int) -> WalletRecord | None:
        """Wallet read straight from the database"""
        wallet = self.db.get(Wallet, wallet_id, populate_existing=True)
        return _wallet_record(wallet) if wallet else None

    def create_wallet(self, name: str, balance: Decimal) -> WalletRecord:
        wallet = Wallet(name=name, balance=balance, version=0, created_at=utc_now())
        self.db.add(wallet)
        try:
            self._commit()
        finally:
            self.cache.invalidate_wallets()
        self.db.refresh(wallet)
        return _wallet_record(wallet)

    def rename_wallet(self, wallet_id: int, name: str) -> WalletRecord | None:
        wallet = self.db.get(Wallet, wallet_id)
        if wallet is None:
            return None
        wallet.name = name
        try:
            self._commit()
        finally:
            self.cache.invalidate_wallets()
        self.db.refresh(wallet)
        return _wallet_record(wallet)

    def delete_wallet(self, wallet_id: int) -> bool:
        wallet = self.db.get(Wallet, wallet_id)
        if wallet is None:
            return False
        self.db.delete(wallet)
        try:
            self._commit()
        finally:
            self.cache.invalidate_wallets()
        return True

    def set_wallet_balance(self, wallet: WalletRecord, new_balance: Decimal) -> WalletRecord:
        """
        Compare-and-swap balance write.

        Succeeds only while the row still has the version `wallet` was read
        with; the version is bumped on success.

        Raises:
            WalletConflictError: row changed or disappeared since it was read
        """
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet.id, Wallet.version == wallet.version)
            .values(balance=new_balance, version=Wallet.version + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            try:
                result = self.db.execute(stmt)
            except SQLAlchemyError:
                self.db.rollback()
                raise
            if result.rowcount != 1:
                self.db.rollback()
                logger.warning(
                    "Balance update rejected for wallet %s: version %s is stale",
                    wallet.id, wallet.version,
                )
                raise WalletConflictError(wallet.id, wallet.version)
            self._commit()
        finally:
            self.cache.invalidate_wallets()

        return WalletRecord(
            id=wallet.id,
            name=wallet.name,
            balance=Decimal(new_balance),
            version=wallet.version + 1,
            created_at=wallet.created_at,
        )

    def sum_wallet_balances(self) -> Decimal:
        """Fresh total of all wallet balances (bypasses the cache)"""
        balances = self.db.scalars(select(Wallet.balance)).all()
        return sum((Decimal(b) for b in balances), Decimal("0"))

    def count_wallet_transactions(self, wallet_id: int) -> int:
        return self.db.scalar(
            select(func.count()).select_from(Transaction).where(Transaction.wallet_id == wallet_id)
        ) or 0

    # --- categories --------------------------------------------------------

    def list_categories(self, category_type: str | None = None) -> list[CategoryRecord]:
        categories = self.cache.get_categories()
        if categories is None:
            generation = self.cache.categories_generation()
            rows = self.db.scalars(select(Category).order_by(Category.name, Category.id)).all()
            categories = [_category_record(c) for c in rows]
            self.cache.put_categories(categories, generation)
        return filter_by_type(categories, category_type)

    def get_category(self, category_id: int) -> CategoryRecord | None:
        for category in self.list_categories():
            if category.id == category_id:
                return category
        return None

    def create_category(self, name: str, category_type: str) -> CategoryRecord:
        category = Category(name=name, type=category_type, created_at=utc_now())
        self.db.add(category)
        try:
            self._commit()
        finally:
            self.cache.invalidate_categories()
        self.db.refresh(category)
        return _category_record(category)

    # --- transactions ------------------------------------------------------

    def list_transactions(
        self,
        transaction_type: str | None = None,
        wallet_id: int | None = None,
        category_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        order_by: str = "date",
        limit: int | None = None,
    ) -> list[Transaction]:
        """
        Transactions newest first

        Args:
            order_by: "date" (transaction date) or "created_at" (insertion time)
        """
        query = select(Transaction)
        if transaction_type:
            query = query.where(Transaction.type == transaction_type)
        if wallet_id is not None:
            query = query.where(Transaction.wallet_id == wallet_id)
        if category_id is not None:
            query = query.where(Transaction.category_id == category_id)
        if start_date is not None:
            query = query.where(Transaction.date >= start_date)
        if end_date is not None:
            query = query.where(Transaction.date <= end_date)

        if order_by == "created_at":
            query = query.order_by(Transaction.created_at.desc(), Transaction.id.desc())
        else:
            query = query.order_by(Transaction.date.desc(), Transaction.id.desc())

        if limit is not None:
            query = query.limit(limit)
        return list(self.db.scalars(query).all())

    def get_transaction(self, transaction_id: int) -> Transaction | None:
        return self.db.get(Transaction, transaction_id)

    def create_transaction(
        self,
        amount: Decimal,
        transaction_type: str,
        wallet_id: int,
        tx_date: date,
        description: str = "",
        category_id: int | None = None,
    ) -> Transaction:
        tx = Transaction(
            amount=amount,
            type=transaction_type,
            wallet_id=wallet_id,
            category_id=category_id,
            description=description,
            date=tx_date,
            created_at=utc_now(),
        )
        self.db.add(tx)
        self._commit()
        self.db.refresh(tx)
        return tx

    def delete_transaction(self, transaction_id: int) -> bool:
        tx = self.db.get(Transaction, transaction_id)
        if tx is None:
            return False
        self.db.delete(tx)
        self._commit()
        return True

    # --- balance history ---------------------------------------------------

    def list_balance_history(self) -> list[BalanceHistory]:
        return list(self.db.scalars(
            select(BalanceHistory).order_by(BalanceHistory.timestamp, BalanceHistory.id)
        ).all())

    def append_balance_snapshot(self, total_balance: Decimal, timestamp: datetime | None = None) -> BalanceHistory:
        snapshot = BalanceHistory(total_balance=total_balance, timestamp=timestamp or utc_now())
        self.db.add(snapshot)
        self._commit()
        self.db.refresh(snapshot)
        return snapshot
