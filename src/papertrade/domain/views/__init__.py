"""View models for service outputs."""

from papertrade.domain.views.portfolio import (
    Quote,
    Position,
    AccountSummary,
    BalancePoint,
    BalanceHistory,
)
from papertrade.domain.views.trade import (
    LotConsumption,
    FifoPlan,
    BuyResult,
    SellResult,
)

__all__ = [
    "Quote",
    "Position",
    "AccountSummary",
    "BalancePoint",
    "BalanceHistory",
    "LotConsumption",
    "FifoPlan",
    "BuyResult",
    "SellResult",
]
