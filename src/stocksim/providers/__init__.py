"""Market data providers module."""

from stocksim.providers.market_data_provider import MarketDataProvider
from stocksim.providers.iex_provider import IexMarketDataProvider
from stocksim.providers.stub_provider import StubMarketDataProvider
from stocksim.providers.factory import build_market_data_provider

__all__ = [
    "MarketDataProvider",
    "IexMarketDataProvider",
    "StubMarketDataProvider",
    "build_market_data_provider",
]
