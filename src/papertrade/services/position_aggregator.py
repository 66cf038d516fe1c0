"""Position aggregator: derives per-symbol positions from open lots."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.core.exceptions import NotFoundError, QuoteUnavailableError
from papertrade.core.money import ZERO, quantize_cash, quantize_price
from papertrade.domain.models import Lot
from papertrade.domain.views import Position, Quote
from papertrade.repositories.protocols import LotRepository
from papertrade.services.price_oracle import PriceOracle

logger = logging.getLogger(__name__)

PERCENT_QUANTUM = Decimal("0.01")


@dataclass
class _LotTotals:
    quantity: Decimal = ZERO
    cost: Decimal = ZERO
    acquired_dates: list[datetime] = field(default_factory=list)


def aggregate_lots(lots: list[Lot]) -> dict[str, _LotTotals]:
    """Sum quantity and cost per symbol, keeping first-seen symbol order."""
    totals: dict[str, _LotTotals] = {}
    for lot in lots:
        entry = totals.setdefault(lot.symbol, _LotTotals())
        entry.quantity += lot.quantity
        entry.cost += lot.quantity * lot.unit_cost
        entry.acquired_dates.append(lot.acquired_at_est)
    return totals


def build_position(symbol: str, totals: _LotTotals, quote: Optional[Quote]) -> Position:
    """
    Value one symbol's lots at ``quote``.

    Without a quote the average cost stands in for the market price, so
    the position reports zero profit/loss.
    """
    average_cost = quantize_price(totals.cost / totals.quantity)
    cost_basis = quantize_cash(totals.cost)

    if quote is None:
        current_price = average_cost
        market_value = cost_basis
    else:
        current_price = quote.price
        market_value = quantize_cash(totals.quantity * quote.price)

    profit_loss = market_value - cost_basis
    if cost_basis > 0:
        profit_loss_percent = (profit_loss / cost_basis * 100).quantize(PERCENT_QUANTUM)
    else:
        profit_loss_percent = Decimal("0")

    return Position(
        symbol=symbol,
        quantity=totals.quantity,
        average_cost=average_cost,
        current_price=current_price,
        market_value=market_value,
        cost_basis=cost_basis,
        profit_loss=profit_loss,
        profit_loss_percent=profit_loss_percent,
        price_available=quote is not None,
        acquired_dates=list(totals.acquired_dates),
    )


class PositionAggregator:
    """
    Read-only view of a user's holdings.

    Positions are recomputed from the open lots on every call and never
    stored. Quotes are fetched concurrently, one per symbol.
    """

    def __init__(
        self,
        lot_repo: LotRepository,
        price_oracle: PriceOracle,
        max_workers: int = 8,
    ):
        self._lot_repo = lot_repo
        self._oracle = price_oracle
        self._max_workers = max_workers

    def list_positions(self, user_id: str) -> list[Position]:
        """All open positions, in order of each symbol's oldest lot."""
        totals = aggregate_lots(self._lot_repo.list_by_user(user_id))
        if not totals:
            return []

        symbols = list(totals)
        workers = min(len(symbols), self._max_workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            quotes = list(executor.map(self._quote_or_none, symbols))

        return [
            build_position(symbol, totals[symbol], quote)
            for symbol, quote in zip(symbols, quotes)
        ]

    def get_position(self, user_id: str, symbol: str) -> Position:
        """The position in one symbol. Raises NotFoundError when none is held."""
        symbol = symbol.strip().upper()
        totals = aggregate_lots(self._lot_repo.list_open_lots(user_id, symbol))
        if symbol not in totals:
            raise NotFoundError("Position", symbol)
        return build_position(symbol, totals[symbol], self._quote_or_none(symbol))

    def _quote_or_none(self, symbol: str) -> Optional[Quote]:
        try:
            return self._oracle.quote(symbol)
        except QuoteUnavailableError as exc:
            logger.warning("Valuing %s at average cost: %s", symbol, exc.message)
            return None
