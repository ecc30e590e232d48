"""Market data service: validated, uncached access to quotes and top of book."""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

from stocksim.core.exceptions import SymbolNotFoundError
from stocksim.core.validation import normalize_symbol
from stocksim.domain.views import Quote, TopOfBook
from stocksim.providers.market_data_provider import MarketDataProvider

T = TypeVar("T")


class MarketDataService:
    """
    Service for fetching market data.

    Every call goes to the provider; prices are never cached, so results
    reflect the latest known price at call time. Batch methods fetch one
    symbol at a time unless max_workers > 1, in which case they fan out
    over a thread pool. Either way a missing symbol raises.
    """

    def __init__(self, provider: MarketDataProvider, max_workers: int = 1):
        self._provider = provider
        self._max_workers = max(1, max_workers)

    def get_top(self, symbol: str) -> TopOfBook:
        """Return the top-of-book snapshot for symbol."""
        symbol = normalize_symbol(symbol)
        tops = self._provider.get_tops([symbol])
        for top in tops:
            if top.symbol == symbol:
                return top
        raise SymbolNotFoundError(symbol)

    def get_quote(self, symbol: str) -> Quote:
        """Return the full quote for symbol."""
        symbol = normalize_symbol(symbol)
        quote = self._provider.get_quote(symbol)
        if quote is None:
            raise SymbolNotFoundError(symbol)
        return quote

    def get_tops(self, symbols: list[str]) -> dict[str, TopOfBook]:
        """Return top-of-book snapshots keyed by normalized symbol, in input order."""
        return self._fetch_each(symbols, self.get_top)

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return quotes keyed by normalized symbol, in input order."""
        return self._fetch_each(symbols, self.get_quote)

    def _fetch_each(self, symbols: list[str], fetch: Callable[[str], T]) -> dict[str, T]:
        normalized = list(dict.fromkeys(normalize_symbol(s) for s in symbols))
        if not normalized:
            return {}
        if self._max_workers == 1 or len(normalized) == 1:
            return {symbol: fetch(symbol) for symbol in normalized}

        workers = min(self._max_workers, len(normalized))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() re-raises the first failure in input order
            results = list(pool.map(fetch, normalized))
        return dict(zip(normalized, results))
