"""
Tests for adding and deleting transactions
"""
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from walletbook.application.transactions import (
    CreateTransactionUseCase,
    DeleteTransactionUseCase,
    default_period,
    list_transactions,
)
from walletbook.domain.errors import TransactionValidationError, TransactionStepError, NotFoundError
from walletbook.infrastructure.store import FinanceStore


def db_failure():
    return OperationalError("UPDATE wallets ...", {}, Exception("connection lost"))


@pytest.fixture
def cash(store):
    return store.create_wallet("Cash", Decimal("1000"))


@pytest.fixture
def food(store):
    return store.create_category("Food", "expense")


def test_add_income_increases_balance(store, cash):
    result = CreateTransactionUseCase(store).execute(
        amount="250", transaction_type="income", wallet_id=cash.id, tx_date=date(2024, 3, 10)
    )

    assert result.transaction.amount == Decimal("250")
    assert result.transaction.date == date(2024, 3, 10)
    assert store.get_wallet(cash.id).balance == Decimal("1250")


def test_add_expense_decreases_balance_and_records_snapshot(store, cash, food):
    result = CreateTransactionUseCase(store).execute(
        amount="99,50",
        transaction_type="expense",
        wallet_id=cash.id,
        category_id=food.id,
        description=" Lunch ",
    )

    assert result.snapshot_recorded is True
    assert result.transaction.description == "Lunch"
    assert result.transaction.category_id == food.id
    assert store.get_wallet(cash.id).balance == Decimal("900.50")
    assert store.list_balance_history()[-1].total_balance == Decimal("900.50")


@pytest.mark.parametrize("amount", ["0", "-5", "abc", "NaN", "Infinity"])
def test_add_rejects_invalid_amount(store, cash, amount):
    with pytest.raises(TransactionValidationError):
        CreateTransactionUseCase(store).execute(amount=amount, transaction_type="income", wallet_id=cash.id)

    assert store.list_transactions() == []
    assert store.get_wallet(cash.id).balance == Decimal("1000")


def test_add_rejects_unknown_type_wallet_and_category(store, cash):
    use_case = CreateTransactionUseCase(store)
    with pytest.raises(TransactionValidationError, match="Invalid transaction type"):
        use_case.execute(amount="1", transaction_type="refund", wallet_id=cash.id)
    with pytest.raises(TransactionValidationError, match="Wallet #404 not found"):
        use_case.execute(amount="1", transaction_type="income", wallet_id=404)
    with pytest.raises(TransactionValidationError, match="Category #7 not found"):
        use_case.execute(amount="1", transaction_type="income", wallet_id=cash.id, category_id=7)


def test_category_type_mismatch_is_allowed(store, cash, food):
    result = CreateTransactionUseCase(store).execute(
        amount="10", transaction_type="income", wallet_id=cash.id, category_id=food.id
    )
    assert result.transaction.category_id == food.id


def test_balance_failure_keeps_inserted_transaction(store, cash):
    """Steps are independent writes: the inserted row stays when the balance write fails"""
    with patch.object(store, "set_wallet_balance", side_effect=db_failure()):
        with pytest.raises(TransactionStepError) as exc_info:
            CreateTransactionUseCase(store).execute(amount="100", transaction_type="income", wallet_id=cash.id)

    error = exc_info.value
    assert error.step == "update_wallet_balance"
    assert error.completed_steps == ["insert_transaction"]
    assert str(error) == "Failed to add transaction"
    assert len(store.list_transactions()) == 1
    assert store.get_wallet(cash.id).balance == Decimal("1000")


def test_snapshot_failure_is_swallowed(store, cash):
    with patch.object(store, "append_balance_snapshot", side_effect=db_failure()):
        result = CreateTransactionUseCase(store).execute(amount="5", transaction_type="expense", wallet_id=cash.id)

    assert result.snapshot_recorded is False
    assert store.get_wallet(cash.id).balance == Decimal("995")
    assert store.list_balance_history() == []


@pytest.mark.parametrize("tx_type, expected", [("income", Decimal("1000")), ("expense", Decimal("1000"))])
def test_delete_restores_balance(store, cash, tx_type, expected):
    result = CreateTransactionUseCase(store).execute(amount="300", transaction_type=tx_type, wallet_id=cash.id)
    assert store.get_wallet(cash.id).balance != expected

    DeleteTransactionUseCase(store).execute(result.transaction.id)

    assert store.get_wallet(cash.id).balance == expected
    assert store.list_transactions() == []


def test_delete_with_missing_wallet_only_deletes_row(store):
    tx = store.create_transaction(Decimal("40"), "income", 12345, date(2024, 3, 1))

    DeleteTransactionUseCase(store).execute(tx.id)

    assert store.get_transaction(tx.id) is None


def test_delete_missing_transaction(store):
    with pytest.raises(NotFoundError):
        DeleteTransactionUseCase(store).execute(1)


def test_delete_keeps_row_when_compensation_fails(store, cash):
    tx = store.create_transaction(Decimal("40"), "income", cash.id, date(2024, 3, 1))

    with patch.object(store, "set_wallet_balance", side_effect=db_failure()):
        with pytest.raises(TransactionStepError) as exc_info:
            DeleteTransactionUseCase(store).execute(tx.id)

    assert exc_info.value.completed_steps == []
    assert store.get_transaction(tx.id) is not None


def test_default_period():
    assert default_period(date(2024, 3, 17)) == (date(2024, 3, 1), date(2024, 3, 17))


def test_list_transactions_validation(store):
    with pytest.raises(TransactionValidationError):
        list_transactions(store, transaction_type="refund")
    with pytest.raises(TransactionValidationError):
        list_transactions(store, order_by="amount")
    with pytest.raises(TransactionValidationError):
        list_transactions(store, start_date=date(2024, 3, 2), end_date=date(2024, 3, 1))


def test_add_after_concurrent_balance_write(db_session, cache, store, cash):
    """A balance written while this store was loading wallets is not served from the cache"""
    other = FinanceStore(db_session, cache)
    put_wallets = cache.put_wallets

    def write_then_put(wallets, generation):
        other.set_wallet_balance(other.get_wallet(cash.id), Decimal("40"))
        return put_wallets(wallets, generation)

    with patch.object(cache, "put_wallets", side_effect=write_then_put):
        store.list_wallets()

    result = CreateTransactionUseCase(store).execute(amount="10", transaction_type="income", wallet_id=cash.id)

    assert len(store.list_transactions()) == 1
    assert result.transaction.amount == Decimal("10")
    assert store.get_wallet(cash.id).balance == Decimal("50")
