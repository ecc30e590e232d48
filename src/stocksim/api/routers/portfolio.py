"""Valuation API: account value, portfolio report and leaderboard."""

from fastapi import APIRouter, Depends

from stocksim.api.deps import get_user_service, get_valuation_service
from stocksim.api.schemas.portfolio import (
    AccountValueResponse,
    LeaderboardEntry,
    PortfolioReportResponse,
    PortfolioRowResponse,
)
from stocksim.services import UserService, ValuationService

router = APIRouter(tags=["portfolio"])


@router.get("/users/{user_id}/account-value", response_model=AccountValueResponse)
def get_account_value(
    user_id: str,
    svc: ValuationService = Depends(get_valuation_service),
):
    """Cash plus current market value of all holdings."""
    value = svc.get_account_value(user_id)
    return AccountValueResponse(user_id=user_id, account_value=round(float(value), 2))


@router.get("/users/{user_id}/portfolio", response_model=PortfolioReportResponse)
def get_portfolio(
    user_id: str,
    svc: ValuationService = Depends(get_valuation_service),
    user_svc: UserService = Depends(get_user_service),
):
    """Per-holding gain/loss report."""
    rows = svc.build_portfolio_report(user_id)
    user = user_svc.get_user(user_id)
    return PortfolioReportResponse(
        user_id=user.user_id,
        cash=round(float(user.cash), 2),
        rows=[
            PortfolioRowResponse(
                symbol=r.symbol,
                latest_price=float(r.latest_price),
                today_gain_loss=float(r.today_gain_loss),
                total_gain_loss=float(r.total_gain_loss),
                weighted_average_price=float(r.weighted_average_price),
                current_value=float(r.current_value),
                shares=float(r.shares),
                cost_basis=float(r.cost_basis),
            )
            for r in rows
        ],
    )


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
def get_leaderboard(svc: ValuationService = Depends(get_valuation_service)):
    """All users ranked by account value, highest first."""
    return [
        LeaderboardEntry(
            rank=i,
            username=entry.username,
            account_value=round(float(entry.account_value), 2),
        )
        for i, entry in enumerate(svc.get_all_account_values(), start=1)
    ]
