"""Provider selection from settings."""

import logging

from stocksim.config.settings import Settings
from stocksim.providers.iex_provider import IexMarketDataProvider
from stocksim.providers.market_data_provider import MarketDataProvider
from stocksim.providers.stub_provider import StubMarketDataProvider

logger = logging.getLogger(__name__)


def build_market_data_provider(settings: Settings) -> MarketDataProvider:
    """Return the IEX provider when a token is configured, else the offline stub."""
    if settings.market_data_token:
        return IexMarketDataProvider(
            base_url=settings.market_data_base_url,
            token=settings.market_data_token,
            timeout_seconds=settings.market_data_timeout_seconds,
        )
    logger.info("No market data token configured; using stub provider")
    return StubMarketDataProvider()
