"""SQLAlchemy implementation of UnitOfWork."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from papertrade.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def flush_or_raise(db: Session, action: str) -> None:
    """Flush staged writes, translating store failures into PersistenceError."""
    try:
        db.flush()
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to {action}") from exc


class SqlAlchemyUnitOfWork:
    """One database transaction spanning account and lot writes."""

    def __init__(self, db: Session):
        self._db = db

    def commit(self) -> None:
        """Commit staged writes; on failure roll back and raise PersistenceError."""
        try:
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise PersistenceError("Failed to commit trade") from exc

    def rollback(self) -> None:
        """Discard all staged writes."""
        try:
            self._db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")
            raise
