"""IEX Cloud market data provider over HTTP."""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from stocksim.core.exceptions import UpstreamUnavailableError
from stocksim.core.timezone import EASTERN_TZ
from stocksim.domain.views import Quote, TopOfBook

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _from_epoch_ms(value: Any) -> Optional[datetime]:
    millis = _to_int(value)
    if not millis:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=EASTERN_TZ)


class IexMarketDataProvider:
    """
    Fetches tops and quotes from the IEX Cloud REST API.

    The API token travels as the `token` query parameter. Every call goes
    to the network with the configured timeout; nothing is cached or retried.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
        )

    def get_tops(self, symbols: list[str]) -> list[TopOfBook]:
        """Fetch the multi-symbol top-of-book feed."""
        if not symbols:
            return []
        payload = self._get_json("/tops", {"symbols": ",".join(s.lower() for s in symbols)})
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise UpstreamUnavailableError("Unexpected response from market data provider")

        tops = []
        for entry in payload:
            if not isinstance(entry, dict):
                continue
            price = _to_decimal(entry.get("lastSalePrice"))
            symbol = entry.get("symbol")
            if not symbol or price is None:
                continue
            tops.append(
                TopOfBook(
                    symbol=str(symbol).upper(),
                    last_sale_price=price,
                    bid_price=_to_decimal(entry.get("bidPrice")),
                    ask_price=_to_decimal(entry.get("askPrice")),
                    volume=_to_int(entry.get("volume")),
                    last_updated=_from_epoch_ms(entry.get("lastUpdated")),
                )
            )
        return tops

    def get_quote(self, symbol: str) -> Optional[Quote]:
        """Fetch the per-symbol quote object."""
        payload = self._get_json(f"/stock/{symbol.lower()}/quote", {})
        if not payload:
            return None
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError("Unexpected response from market data provider")

        latest_price = _to_decimal(payload.get("latestPrice"))
        if latest_price is None:
            return None
        return Quote(
            symbol=str(payload.get("symbol") or symbol).upper(),
            latest_price=latest_price,
            change=_to_decimal(payload.get("change")) or Decimal("0"),
            open=_to_decimal(payload.get("open")),
            high=_to_decimal(payload.get("high")),
            low=_to_decimal(payload.get("low")),
            previous_close=_to_decimal(payload.get("previousClose")),
            volume=_to_int(payload.get("volume")),
            week52_high=_to_decimal(payload.get("week52High")),
            week52_low=_to_decimal(payload.get("week52Low")),
        )

    def close(self) -> None:
        """Close the underlying HTTP client if this provider created it."""
        if self._owns_client:
            self._client.close()

    def _get_json(self, path: str, params: dict) -> Any:
        """
        GET a JSON document.

        Returns None when the provider reports an unknown symbol (404);
        raises UpstreamUnavailableError on anything else that is not 2xx.
        """
        try:
            response = self._client.get(path, params={**params, "token": self._token})
        except httpx.TimeoutException as exc:
            logger.warning("Market data request to %s timed out", path)
            raise UpstreamUnavailableError("Market data provider timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Market data request to %s failed: %s", path, exc)
            raise UpstreamUnavailableError(f"Market data provider unavailable: {exc}") from exc

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            logger.warning("Market data API %s returned %s", path, response.status_code)
            raise UpstreamUnavailableError(
                f"Market data provider returned HTTP {response.status_code}"
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError("Market data provider returned invalid JSON") from exc
