"""Repository protocol definitions (interfaces)."""

from papertrade.repositories.protocols.account_repo import AccountRepository
from papertrade.repositories.protocols.lot_repo import LotRepository
from papertrade.repositories.protocols.transaction_log_repo import TransactionLogRepository
from papertrade.repositories.protocols.unit_of_work import UnitOfWork

__all__ = [
    "AccountRepository",
    "LotRepository",
    "TransactionLogRepository",
    "UnitOfWork",
]
