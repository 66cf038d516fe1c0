"""SQLAlchemy implementation of TransactionLogRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from papertrade.core.exceptions import LogAppendError
from papertrade.core.timezone import from_storage, to_storage
from papertrade.domain.models import TransactionLogEntry
from papertrade.repositories.sqlalchemy.orm_models import TransactionLogORM


class SqlAlchemyTransactionLogRepository:
    """SQLAlchemy-backed append-only trade ledger."""

    def __init__(self, db: Session):
        self._db = db

    def append(self, entry: TransactionLogEntry) -> TransactionLogEntry:
        """Write an entry and commit it on its own."""
        orm_entry = TransactionLogORM(
            user_id=entry.user_id,
            symbol=entry.symbol,
            side=entry.side,
            quantity=entry.quantity,
            price=entry.price,
            total_amount=entry.total_amount,
            executed_at_utc=to_storage(entry.executed_at_est),
        )
        try:
            self._db.add(orm_entry)
            self._db.commit()
            self._db.refresh(orm_entry)
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise LogAppendError(
                f"Failed to record {entry.side.value} of {entry.symbol} for {entry.user_id}"
            ) from exc
        return self._to_domain(orm_entry)

    def list_by_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        symbol: Optional[str] = None,
    ) -> list[TransactionLogEntry]:
        """List entries for a user in execution order."""
        conditions = [TransactionLogORM.user_id == user_id]
        if start:
            conditions.append(TransactionLogORM.executed_at_utc >= to_storage(start))
        if end:
            conditions.append(TransactionLogORM.executed_at_utc <= to_storage(end))
        if symbol:
            conditions.append(TransactionLogORM.symbol == symbol)

        query = (
            self._db.query(TransactionLogORM)
            .filter(and_(*conditions))
            .order_by(TransactionLogORM.executed_at_utc, TransactionLogORM.entry_id)
        )
        return [self._to_domain(e) for e in query.all()]

    @staticmethod
    def _to_domain(orm: TransactionLogORM) -> TransactionLogEntry:
        """Convert ORM model to domain model."""
        return TransactionLogEntry(
            entry_id=orm.entry_id,
            user_id=orm.user_id,
            symbol=orm.symbol,
            side=orm.side,
            quantity=Decimal(str(orm.quantity)),
            price=Decimal(str(orm.price)),
            total_amount=Decimal(str(orm.total_amount)),
            executed_at_est=from_storage(orm.executed_at_utc),
        )
