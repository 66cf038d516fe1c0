"""Price oracle: one fresh, validated, time-bounded quote per call."""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from typing import Optional

from papertrade.core.exceptions import QuoteUnavailableError
from papertrade.core.money import quantize_price, to_decimal
from papertrade.core.timezone import now_eastern
from papertrade.domain.views import Quote
from papertrade.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0
DEFAULT_FETCH_WORKERS = 8


class PriceOracle:
    """
    Wraps a market data provider for trade execution and valuation.

    Every call reaches the provider; prices are never cached, since a trade
    must execute at the price current when it is placed. A provider error,
    an unknown symbol, a non-positive price or a timeout all raise
    QuoteUnavailableError.

    Provider calls run on one bounded pool shared by every quote, so a hung
    provider ties up at most that many threads. The timeout covers time spent
    waiting for a free worker as well as the call itself.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self._provider = provider
        self._timeout = timeout_seconds
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=DEFAULT_FETCH_WORKERS,
            thread_name_prefix="quote",
        )

    def close(self) -> None:
        """Release the pool if this oracle created it; a hung call is not awaited."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def quote(self, symbol: str) -> Quote:
        """Return the current price for ``symbol``."""
        symbol = symbol.strip().upper()
        future = self._executor.submit(self._provider.get_quote, symbol)
        try:
            quote = future.result(timeout=self._timeout)
        except FuturesTimeoutError:
            future.cancel()
            logger.warning("Quote for %s timed out after %ss", symbol, self._timeout)
            raise QuoteUnavailableError(symbol, f"timed out after {self._timeout:g}s") from None
        except Exception as exc:
            logger.warning("Quote for %s failed: %s", symbol, exc)
            raise QuoteUnavailableError(symbol, "price source error") from exc

        if quote is None:
            raise QuoteUnavailableError(symbol, "symbol not found")

        try:
            price = to_decimal(quote.price)
        except ValueError:
            raise QuoteUnavailableError(symbol, f"invalid price {quote.price!r}") from None
        if price <= 0:
            raise QuoteUnavailableError(symbol, f"non-positive price {price}")

        return Quote(
            symbol=symbol,
            price=quantize_price(price),
            as_of=quote.as_of or now_eastern(),
        )
