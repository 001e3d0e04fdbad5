"""
Transaction API endpoints (including transfers between wallets)
"""
from datetime import date as date_type

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from walletbook.api.deps import get_store
from walletbook.application.transactions import (
    CreateTransactionUseCase,
    DeleteTransactionUseCase,
    default_period,
    list_transactions as list_transactions_query,
)
from walletbook.application.transfers import TransferFundsUseCase
from walletbook.infrastructure.db.models import Transaction
from walletbook.infrastructure.store import FinanceStore


router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


# === Request/Response models ===

class CreateTransactionRequest(BaseModel):
    amount: str
    type: str  # income/expense
    wallet_id: int
    category_id: int | None = None
    description: str = ""
    date: date_type | None = None


class TransferRequest(BaseModel):
    from_wallet_id: int
    to_wallet_id: int
    amount: str
    description: str | None = None


class TransactionResponse(BaseModel):
    id: int
    amount: str  # Decimal as string
    type: str
    description: str
    wallet_id: int
    category_id: int | None
    date: date_type


class AddTransactionResponse(TransactionResponse):
    snapshot_recorded: bool


class TransferResponse(BaseModel):
    message: str
    from_wallet_id: int
    from_balance: str
    to_wallet_id: int
    to_balance: str
    expense_transaction_id: int
    income_transaction_id: int
    snapshot_recorded: bool


def to_transaction_response(tx: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=tx.id,
        amount=str(tx.amount),
        type=tx.type,
        description=tx.description,
        wallet_id=tx.wallet_id,
        category_id=tx.category_id,
        date=tx.date,
    )


# === Endpoints ===

@router.get("/", response_model=list[TransactionResponse])
def list_transactions(
    type: str | None = None,
    wallet_id: int | None = None,
    category_id: int | None = None,
    start_date: date_type | None = None,
    end_date: date_type | None = None,
    order_by: str = "date",
    limit: int | None = None,
    store: FinanceStore = Depends(get_store),
):
    """
    Transactions, newest first

    Without dates the range is the current month up to today.
    """
    if start_date is None and end_date is None:
        start_date, end_date = default_period()

    rows = list_transactions_query(
        store,
        transaction_type=type,
        wallet_id=wallet_id,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        order_by=order_by,
        limit=limit,
    )
    return [to_transaction_response(tx) for tx in rows]


@router.post("/", response_model=AddTransactionResponse, status_code=201)
def add_transaction(req: CreateTransactionRequest, store: FinanceStore = Depends(get_store)):
    result = CreateTransactionUseCase(store).execute(
        amount=req.amount,
        transaction_type=req.type,
        wallet_id=req.wallet_id,
        category_id=req.category_id,
        description=req.description,
        tx_date=req.date,
    )
    return AddTransactionResponse(
        **to_transaction_response(result.transaction).model_dump(),
        snapshot_recorded=result.snapshot_recorded,
    )


@router.post("/transfer", response_model=TransferResponse)
def transfer(req: TransferRequest, store: FinanceStore = Depends(get_store)):
    """Move money between two wallets"""
    result = TransferFundsUseCase(store).execute(
        source_id=req.from_wallet_id,
        destination_id=req.to_wallet_id,
        amount=req.amount,
        description=req.description,
    )
    return TransferResponse(
        message=result.message,
        from_wallet_id=result.source.id,
        from_balance=str(result.source.balance),
        to_wallet_id=result.destination.id,
        to_balance=str(result.destination.balance),
        expense_transaction_id=result.expense_transaction_id,
        income_transaction_id=result.income_transaction_id,
        snapshot_recorded=result.snapshot_recorded,
    )


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: int, store: FinanceStore = Depends(get_store)):
    DeleteTransactionUseCase(store).execute(transaction_id)
    return Response(status_code=204)
