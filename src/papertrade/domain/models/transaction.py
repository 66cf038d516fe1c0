"""Transaction log entry domain model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.domain.models.enums import TradeSide


@dataclass(frozen=True)
class TransactionLogEntry:
    """
    Immutable record of one executed trade.

    ``total_amount`` is the cash that changed hands: cost for a BUY,
    proceeds for a SELL.
    """

    user_id: str
    symbol: str
    side: TradeSide
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    executed_at_est: datetime
    entry_id: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.side, str):
            object.__setattr__(self, "side", TradeSide(self.side))

    @property
    def net_cash_impact(self) -> Decimal:
        """Positive = cash added, negative = cash removed."""
        if self.side == TradeSide.BUY:
            return -self.total_amount
        return self.total_amount
