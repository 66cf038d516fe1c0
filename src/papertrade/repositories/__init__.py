"""Repository layer - data access abstractions and implementations."""

from papertrade.repositories.protocols import (
    AccountRepository,
    LotRepository,
    TransactionLogRepository,
    UnitOfWork,
)

__all__ = [
    "AccountRepository",
    "LotRepository",
    "TransactionLogRepository",
    "UnitOfWork",
]
