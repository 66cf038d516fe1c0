"""Stub market data provider for offline/testing use."""

import random
from decimal import Decimal
from typing import Optional

from papertrade.core.timezone import now_eastern
from papertrade.domain.views import Quote


# Deterministic fake prices for common symbols
_STUB_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("185.50"),
    "GOOGL": Decimal("142.75"),
    "MSFT": Decimal("378.25"),
    "AMZN": Decimal("178.50"),
    "TSLA": Decimal("248.75"),
    "NVDA": Decimal("485.25"),
    "META": Decimal("505.50"),
    "SPY": Decimal("485.25"),
    "QQQ": Decimal("418.75"),
    "VTI": Decimal("252.30"),
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Uses predefined prices for common symbols. Unknown symbols get a price
    seeded from the symbol itself, so repeated calls agree.
    """

    def __init__(self, seed: int = 42):
        self._seed = seed

    def get_quote(self, symbol: str) -> Optional[Quote]:
        """Return a stub quote for the requested symbol."""
        upper_symbol = symbol.upper()
        price = _STUB_PRICES.get(upper_symbol)
        if price is None:
            rng = random.Random(f"{self._seed}:{upper_symbol}")
            price = Decimal(str(50 + rng.random() * 200)).quantize(Decimal("0.01"))

        return Quote(symbol=upper_symbol, price=price, as_of=now_eastern())
