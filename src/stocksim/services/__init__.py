"""Service layer - business logic orchestration."""

from stocksim.services.market_data_service import MarketDataService
from stocksim.services.portfolio_ledger import PortfolioLedger
from stocksim.services.trade_executor import TradeExecutor
from stocksim.services.valuation_service import ValuationService
from stocksim.services.user_service import UserService

__all__ = [
    "MarketDataService",
    "PortfolioLedger",
    "TradeExecutor",
    "ValuationService",
    "UserService",
]
