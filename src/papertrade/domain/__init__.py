"""Domain layer - pure business models with no external dependencies."""

from papertrade.domain.models import (
    Account,
    Lot,
    TransactionLogEntry,
    TradeSide,
)

__all__ = [
    "Account",
    "Lot",
    "TransactionLogEntry",
    "TradeSide",
]
