"""SQLAlchemy repository implementations."""

from papertrade.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    Base,
    use_immediate_transactions,
)
from papertrade.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from papertrade.repositories.sqlalchemy.lot_repo import SqlAlchemyLotRepository
from papertrade.repositories.sqlalchemy.transaction_log_repo import SqlAlchemyTransactionLogRepository
from papertrade.repositories.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "Base",
    "use_immediate_transactions",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyLotRepository",
    "SqlAlchemyTransactionLogRepository",
    "SqlAlchemyUnitOfWork",
]
