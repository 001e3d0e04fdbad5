"""
SQLAlchemy ORM models
"""
from datetime import date as date_type, datetime
from decimal import Decimal

from sqlalchemy import String, Integer, Text, TIMESTAMP, Date, Numeric, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from walletbook.infrastructure.db.session import Base


class User(Base):
    """
    Login identity for the session gate
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class Wallet(Base):
    """
    Named running balance.

    `balance` is the authoritative current total; every transaction and
    transfer touching the wallet rewrites it. `version` is bumped on each
    balance write so updates can be compare-and-swap.
    """
    __tablename__ = "wallets"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2),
        nullable=False,
        server_default="0"
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class Category(Base):
    """
    Income/expense category. There is no delete path.
    """
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # income/expense

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class Transaction(Base):
    """
    Single income or expense event against one wallet.

    `amount` is always positive, the sign comes from `type`.
    Transfer legs have no category.
    """
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # income/expense

    category_id: Mapped[int | None] = mapped_column(
        ForeignKey("categories.id"), nullable=True, index=True
    )
    wallet_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )


class BalanceHistory(Base):
    """
    Append-only snapshot of the sum of all wallet balances
    """
    __tablename__ = "balance_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    total_balance: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, index=True)
