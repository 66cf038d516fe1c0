"""View models for trade execution results."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class LotConsumption:
    """Shares taken from one lot by a sale."""

    lot_id: int
    quantity: Decimal
    unit_cost: Decimal
    remaining: Decimal

    @property
    def cost(self) -> Decimal:
        return self.quantity * self.unit_cost

    @property
    def closes_lot(self) -> bool:
        return self.remaining == 0


@dataclass
class FifoPlan:
    """
    Result of walking open lots oldest first for a sale.

    At most the last consumption is partial; every earlier one closes its lot.
    """

    consumptions: list[LotConsumption] = field(default_factory=list)
    cost_removed: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def lots_to_delete(self) -> list[int]:
        return [c.lot_id for c in self.consumptions if c.closes_lot]

    @property
    def lots_to_reduce(self) -> list[tuple[int, Decimal]]:
        return [(c.lot_id, c.remaining) for c in self.consumptions if not c.closes_lot]


@dataclass
class BuyResult:
    """Outcome of an executed buy."""

    symbol: str
    quantity: Decimal
    price: Decimal
    total_cost: Decimal
    new_balance: Decimal
    lot_id: Optional[int] = None
    executed_at: Optional[datetime] = None
    logged: bool = True


@dataclass
class SellResult:
    """Outcome of an executed sell."""

    symbol: str
    quantity: Decimal
    price: Decimal
    total_value: Decimal
    average_cost: Decimal
    profit_loss: Decimal
    new_balance: Decimal
    lots_consumed: list[LotConsumption] = field(default_factory=list)
    executed_at: Optional[datetime] = None
    logged: bool = True
