"""Market data API."""

from typing import Optional

from fastapi import APIRouter, Depends

from stocksim.api.deps import get_market_data_service
from stocksim.api.schemas.portfolio import QuoteResponse, TopOfBookResponse
from stocksim.services import MarketDataService

router = APIRouter(prefix="/quotes", tags=["quotes"])


def _opt(value) -> Optional[float]:
    return float(value) if value is not None else None


@router.get("/{symbol}", response_model=QuoteResponse)
def get_quote(symbol: str, svc: MarketDataService = Depends(get_market_data_service)):
    """Full quote for a symbol."""
    q = svc.get_quote(symbol)
    return QuoteResponse(
        symbol=q.symbol,
        latest_price=float(q.latest_price),
        change=float(q.change),
        open=_opt(q.open),
        high=_opt(q.high),
        low=_opt(q.low),
        previous_close=_opt(q.previous_close),
        volume=q.volume,
        week52_high=_opt(q.week52_high),
        week52_low=_opt(q.week52_low),
    )


@router.get("/{symbol}/top", response_model=TopOfBookResponse)
def get_top(symbol: str, svc: MarketDataService = Depends(get_market_data_service)):
    """Top-of-book snapshot for a symbol."""
    top = svc.get_top(symbol)
    return TopOfBookResponse(
        symbol=top.symbol,
        last_sale_price=float(top.last_sale_price),
        bid_price=_opt(top.bid_price),
        ask_price=_opt(top.ask_price),
        volume=top.volume,
    )
