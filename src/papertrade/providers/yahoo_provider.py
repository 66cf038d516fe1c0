"""Live market data provider backed by Yahoo Finance via yfinance."""

import logging
from decimal import Decimal
from typing import Optional

from papertrade.core.timezone import now_eastern
from papertrade.domain.views import Quote

logger = logging.getLogger(__name__)


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


class YahooFinanceProvider:
    """
    Fetches current prices from Yahoo Finance.

    Reads ``currentPrice`` and falls back to ``regularMarketPrice``. Network
    and parsing errors propagate; the price oracle turns them into an
    unavailable quote.
    """

    def get_quote(self, symbol: str) -> Optional[Quote]:
        """Return the latest price for ``symbol`` or None when Yahoo has none."""
        yf = _get_yf()
        info = yf.Ticker(symbol).info
        if not isinstance(info, dict):
            logger.debug("No quote info returned for %s", symbol)
            return None

        price = info.get("currentPrice")
        if price is None:
            price = info.get("regularMarketPrice")
        if price is None:
            return None

        return Quote(
            symbol=symbol,
            price=Decimal(str(price)),
            as_of=now_eastern(),
        )
