"""API routers package."""

from stocksim.api.routers.users import router as users_router
from stocksim.api.routers.trades import router as trades_router
from stocksim.api.routers.portfolio import router as portfolio_router
from stocksim.api.routers.quotes import router as quotes_router

__all__ = [
    "users_router",
    "trades_router",
    "portfolio_router",
    "quotes_router",
]
