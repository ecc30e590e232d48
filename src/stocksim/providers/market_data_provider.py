"""Market data provider protocol."""

from typing import Optional, Protocol

from stocksim.domain.views import Quote, TopOfBook


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Symbols passed in are already normalized (stripped, upper-case).
    Implementations raise UpstreamUnavailableError on network/API failure
    and never cache results.
    """

    def get_tops(self, symbols: list[str]) -> list[TopOfBook]:
        """
        Fetch top-of-book snapshots for symbols.

        Unknown symbols are omitted; an empty list means nothing matched.
        """
        ...

    def get_quote(self, symbol: str) -> Optional[Quote]:
        """Fetch a full quote for one symbol, or None if the symbol is unknown."""
        ...

    def close(self) -> None:
        """Release any network resources."""
        ...
