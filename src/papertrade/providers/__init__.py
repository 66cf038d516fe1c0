"""Market data providers module."""

from papertrade.providers.market_data_provider import MarketDataProvider
from papertrade.providers.stub_provider import StubMarketDataProvider
from papertrade.providers.yahoo_provider import YahooFinanceProvider

__all__ = [
    "MarketDataProvider",
    "StubMarketDataProvider",
    "YahooFinanceProvider",
]
