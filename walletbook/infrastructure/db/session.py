"""
Engine and sessions for the finance database

One engine per process, built lazily from settings. Request handlers get a
session through `get_db`; scripts use `session_scope`.
"""
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from walletbook.config import get_settings


class Base(DeclarativeBase):
    pass


def build_engine(url: str) -> Engine:
    """SQLite needs cross-thread access (sync routes run in a thread pool); servers get pre-ping"""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


@lru_cache
def get_engine() -> Engine:
    return build_engine(get_settings().get_sqlalchemy_url())


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autoflush=False)


def get_db() -> Iterator[Session]:
    """FastAPI dependency: one session per request, closed when the response is done"""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Session for scripts outside a request

    Uncommitted work is rolled back on error. FinanceStore and the auth
    helpers commit their own writes.
    """
    db = get_session_factory()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Trivial query used by the /ready endpoint

    Raises:
        sqlalchemy.exc.OperationalError: database unreachable
    """
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
