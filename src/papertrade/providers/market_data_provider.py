"""Market data provider protocol."""

from typing import Optional, Protocol

from papertrade.domain.views import Quote


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Implementations fetch a current price for one symbol. Returning None
    means the symbol is unknown; raising means the source failed. Both are
    reported to callers as an unavailable quote.
    """

    def get_quote(self, symbol: str) -> Optional[Quote]:
        """Fetch the current price for ``symbol`` (already upper-cased)."""
        ...
