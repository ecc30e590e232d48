"""Trade API: market buy and sell at the last-sale price."""

from fastapi import APIRouter, Depends

from stocksim.api.deps import get_trade_executor
from stocksim.api.routers.users import holding_to_response
from stocksim.api.schemas.trade import TradeRequest, TradeResponse
from stocksim.domain.views import TradeResult
from stocksim.services import TradeExecutor

router = APIRouter(prefix="/users/{user_id}", tags=["trades"])


def _result_to_response(result: TradeResult) -> TradeResponse:
    return TradeResponse(
        success=result.success,
        side=result.side,
        symbol=result.symbol,
        shares=float(result.shares),
        price=float(result.price),
        amount=float(result.amount),
        cash_after=float(result.cash_after),
        holding=holding_to_response(result.holding) if result.holding else None,
        executed_at_est=result.executed_at_est,
    )


@router.post("/buy", response_model=TradeResponse)
def buy_stock(
    user_id: str,
    data: TradeRequest,
    executor: TradeExecutor = Depends(get_trade_executor),
):
    """Buy shares at the current last-sale price."""
    return _result_to_response(executor.buy(user_id, data.symbol, data.shares))


@router.post("/sell", response_model=TradeResponse)
def sell_stock(
    user_id: str,
    data: TradeRequest,
    executor: TradeExecutor = Depends(get_trade_executor),
):
    """Sell shares at the current last-sale price."""
    return _result_to_response(executor.sell(user_id, data.symbol, data.shares))
