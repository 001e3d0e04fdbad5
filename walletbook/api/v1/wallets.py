"""
Wallet API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from walletbook.api.deps import get_store
from walletbook.api.v1.transactions import TransactionResponse, to_transaction_response
from walletbook.application.wallets import (
    CreateWalletUseCase,
    RenameWalletUseCase,
    DeleteWalletUseCase,
    list_wallets as list_wallets_query,
)
from walletbook.domain.errors import NotFoundError
from walletbook.domain.wallet import WalletRecord
from walletbook.infrastructure.store import FinanceStore


router = APIRouter(prefix="/api/v1/wallets", tags=["wallets"])

RECENT_TRANSACTIONS_LIMIT = 10


# === Request/Response models ===

class CreateWalletRequest(BaseModel):
    name: str
    balance: str = "0"  # Opening balance


class RenameWalletRequest(BaseModel):
    name: str


class WalletResponse(BaseModel):
    id: int
    name: str
    balance: str  # Decimal as string
    version: int
    created_at: datetime | None = None


class WalletDetailResponse(WalletResponse):
    transactions: list[TransactionResponse]


def to_wallet_response(wallet: WalletRecord) -> WalletResponse:
    return WalletResponse(
        id=wallet.id,
        name=wallet.name,
        balance=str(wallet.balance),
        version=wallet.version,
        created_at=wallet.created_at,
    )


# === Endpoints ===

@router.get("/", response_model=list[WalletResponse])
def list_wallets(order: str = "created_at", store: FinanceStore = Depends(get_store)):
    """All wallets (order: created_at, name or balance)"""
    return [to_wallet_response(w) for w in list_wallets_query(store, order)]


@router.post("/", response_model=WalletResponse, status_code=201)
def create_wallet(req: CreateWalletRequest, store: FinanceStore = Depends(get_store)):
    wallet = CreateWalletUseCase(store).execute(name=req.name, initial_balance=req.balance)
    return to_wallet_response(wallet)


@router.get("/{wallet_id}", response_model=WalletDetailResponse)
def get_wallet(wallet_id: int, store: FinanceStore = Depends(get_store)):
    """Wallet with its latest transactions"""
    wallet = store.get_wallet(wallet_id)
    if wallet is None:
        raise NotFoundError(f"Wallet #{wallet_id} not found")

    transactions = store.list_transactions(wallet_id=wallet_id, limit=RECENT_TRANSACTIONS_LIMIT)
    return WalletDetailResponse(
        **to_wallet_response(wallet).model_dump(),
        transactions=[to_transaction_response(tx) for tx in transactions],
    )


@router.patch("/{wallet_id}", response_model=WalletResponse)
def rename_wallet(wallet_id: int, req: RenameWalletRequest, store: FinanceStore = Depends(get_store)):
    return to_wallet_response(RenameWalletUseCase(store).execute(wallet_id, req.name))


@router.delete("/{wallet_id}", status_code=204)
def delete_wallet(wallet_id: int, store: FinanceStore = Depends(get_store)):
    DeleteWalletUseCase(store).execute(wallet_id)
    return Response(status_code=204)
