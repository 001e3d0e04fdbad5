"""
FastAPI dependencies (DB session, data store, authentication)
"""
from fastapi import Depends, Request, HTTPException, status
from sqlalchemy.orm import Session

from walletbook.infrastructure.db.session import get_db as _get_db
from walletbook.infrastructure.db.models import User
from walletbook.infrastructure.store import FinanceStore


# Re-export get_db for convenience
get_db = _get_db


def get_store(request: Request, db: Session = Depends(get_db)) -> FinanceStore:
    """
    FinanceStore bound to the request session and the app-wide cache

    Usage:
        @router.get("/")
        def list_wallets(store: FinanceStore = Depends(get_store)):
            ...
    """
    return FinanceStore(db, request.app.state.finance_cache)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Current user from the session (for API endpoints)

    Raises:
        HTTPException(401): not logged in
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return user
