"""Stub market data provider for offline/testing use."""

from decimal import Decimal
from typing import Optional
import random

from stocksim.core.timezone import now_eastern
from stocksim.domain.views import Quote, TopOfBook


# Deterministic fake (last price, previous close) for common symbols
_STUB_PRICES: dict[str, tuple[Decimal, Decimal]] = {
    "AAPL": (Decimal("185.50"), Decimal("184.25")),
    "GOOGL": (Decimal("142.75"), Decimal("141.50")),
    "MSFT": (Decimal("378.25"), Decimal("376.80")),
    "AMZN": (Decimal("178.50"), Decimal("177.25")),
    "TSLA": (Decimal("248.75"), Decimal("250.10")),
    "NVDA": (Decimal("485.25"), Decimal("482.50")),
    "META": (Decimal("505.50"), Decimal("502.75")),
    "SPY": (Decimal("485.25"), Decimal("484.10")),
    "QQQ": (Decimal("418.75"), Decimal("417.50")),
    "VTI": (Decimal("252.30"), Decimal("251.80")),
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Predefined prices for common symbols; other symbols get a seeded random
    price. Symbols listed in unknown_symbols behave as delisted.
    """

    def __init__(self, seed: int = 42, unknown_symbols: Optional[set[str]] = None):
        self._seed = seed
        self._unknown = {s.upper() for s in (unknown_symbols or set())}

    def get_tops(self, symbols: list[str]) -> list[TopOfBook]:
        """Return stub top-of-book snapshots for requested symbols."""
        as_of = now_eastern()
        result = []
        for symbol in symbols:
            prices = self._prices(symbol)
            if prices is None:
                continue
            last_price, _ = prices
            result.append(
                TopOfBook(
                    symbol=symbol.upper(),
                    last_sale_price=last_price,
                    bid_price=last_price - Decimal("0.01"),
                    ask_price=last_price + Decimal("0.01"),
                    volume=1_000_000,
                    last_updated=as_of,
                )
            )
        return result

    def get_quote(self, symbol: str) -> Optional[Quote]:
        """Return a stub quote, or None for unknown symbols."""
        prices = self._prices(symbol)
        if prices is None:
            return None
        last_price, prev_close = prices
        spread = (last_price * Decimal("0.01")).quantize(Decimal("0.01"))
        return Quote(
            symbol=symbol.upper(),
            latest_price=last_price,
            change=last_price - prev_close,
            open=prev_close,
            high=max(last_price, prev_close) + spread,
            low=min(last_price, prev_close) - spread,
            previous_close=prev_close,
            volume=1_000_000,
            week52_high=(last_price * Decimal("1.25")).quantize(Decimal("0.01")),
            week52_low=(last_price * Decimal("0.75")).quantize(Decimal("0.01")),
        )

    def close(self) -> None:
        """Nothing to release."""

    def _prices(self, symbol: str) -> Optional[tuple[Decimal, Decimal]]:
        upper_symbol = symbol.upper()
        if upper_symbol in self._unknown:
            return None
        if upper_symbol in _STUB_PRICES:
            return _STUB_PRICES[upper_symbol]
        # Seed per symbol so repeated calls agree
        rng = random.Random(f"{self._seed}:{upper_symbol}")
        base_price = Decimal(str(50 + rng.random() * 200))
        last_price = base_price.quantize(Decimal("0.01"))
        change_pct = Decimal(str((rng.random() - 0.5) * 0.04))
        prev_close = (last_price / (1 + change_pct)).quantize(Decimal("0.01"))
        return last_price, prev_close
