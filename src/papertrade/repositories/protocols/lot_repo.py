"""Lot repository protocol."""

from decimal import Decimal
from typing import Protocol

from papertrade.domain.models import Lot


class LotRepository(Protocol):
    """
    Interface for open-lot data access.

    Writes are staged in the caller's unit of work and become visible
    together with the account update when it commits.
    """

    def list_open_lots(self, user_id: str, symbol: str) -> list[Lot]:
        """List open lots for one symbol, oldest first (FIFO order)."""
        ...

    def list_by_user(self, user_id: str) -> list[Lot]:
        """List all open lots for a user, oldest first."""
        ...

    def create(self, lot: Lot) -> Lot:
        """Stage a new lot and return it with its assigned lot_id."""
        ...

    def update_quantity(self, lot_id: int, new_quantity: Decimal) -> None:
        """Stage a reduced quantity for a partially consumed lot."""
        ...

    def delete(self, lot_id: int) -> None:
        """Stage removal of a fully consumed lot."""
        ...
