"""Domain models package."""

from papertrade.domain.models.enums import TradeSide
from papertrade.domain.models.account import Account
from papertrade.domain.models.lot import Lot
from papertrade.domain.models.transaction import TransactionLogEntry

__all__ = [
    "TradeSide",
    "Account",
    "Lot",
    "TransactionLogEntry",
]
