"""Lot domain model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Lot:
    """
    One unconsumed purchase batch of a symbol.

    Lots are consumed oldest first on sale, ordered by ``acquired_at_est``
    with ``lot_id`` (insertion sequence) breaking ties. ``lot_id`` is None
    until the lot has been written.
    """

    user_id: str
    symbol: str
    quantity: Decimal
    unit_cost: Decimal
    acquired_at_est: datetime
    lot_id: Optional[int] = None

    @property
    def cost(self) -> Decimal:
        """Total cost of the shares still held in this lot."""
        return self.quantity * self.unit_cost
