"""SQLAlchemy ORM model definitions.

Timestamps are stored as naive UTC; repositories convert to and from US/Eastern.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    CheckConstraint,
    Enum as SqlEnum,
)

from papertrade.repositories.sqlalchemy.database import Base
from papertrade.domain.models.enums import TradeSide


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("cash_balance >= 0", name="ck_accounts_cash_non_negative"),
    )

    user_id = Column(String(64), primary_key=True)
    cash_balance = Column(Numeric(precision=18, scale=4), nullable=False)
    initial_balance = Column(Numeric(precision=18, scale=4), nullable=False)
    created_at_utc = Column(DateTime, nullable=False)


class LotORM(Base):
    """SQLAlchemy model for Lot (one open purchase batch)."""

    __tablename__ = "lots"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_lots_quantity_positive"),
        CheckConstraint("unit_cost >= 0", name="ck_lots_unit_cost_non_negative"),
        Index("ix_lots_user_symbol_fifo", "user_id", "symbol", "acquired_at_utc", "lot_id"),
    )

    lot_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("accounts.user_id"), nullable=False)
    symbol = Column(String(20), nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), nullable=False)
    unit_cost = Column(Numeric(precision=18, scale=4), nullable=False)
    acquired_at_utc = Column(DateTime, nullable=False)


class TransactionLogORM(Base):
    """SQLAlchemy model for TransactionLogEntry (append-only ledger)."""

    __tablename__ = "transaction_log"
    __table_args__ = (
        Index("ix_transaction_log_user_time", "user_id", "executed_at_utc", "entry_id"),
    )

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("accounts.user_id"), nullable=False)
    symbol = Column(String(20), nullable=False)
    side = Column(SqlEnum(TradeSide), nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), nullable=False)
    price = Column(Numeric(precision=18, scale=4), nullable=False)
    total_amount = Column(Numeric(precision=18, scale=4), nullable=False)
    executed_at_utc = Column(DateTime, nullable=False)
