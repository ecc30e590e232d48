"""Dependency injection for FastAPI."""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from stocksim.config.settings import get_settings
from stocksim.providers import MarketDataProvider, build_market_data_provider
from stocksim.repositories.sqlalchemy import SqlAlchemyUserRepository
from stocksim.repositories.sqlalchemy.database import get_db
from stocksim.services import (
    MarketDataService,
    PortfolioLedger,
    TradeExecutor,
    UserService,
    ValuationService,
)


def get_user_repo(db: Session = Depends(get_db)) -> SqlAlchemyUserRepository:
    """Provide UserRepository instance."""
    return SqlAlchemyUserRepository(db)


def get_market_provider() -> Generator[MarketDataProvider, None, None]:
    """Provide a MarketDataProvider, closing its HTTP client after the request."""
    provider = build_market_data_provider(get_settings())
    try:
        yield provider
    finally:
        provider.close()


def get_market_data_service(
    provider: MarketDataProvider = Depends(get_market_provider),
) -> MarketDataService:
    """Provide MarketDataService instance."""
    return MarketDataService(
        provider=provider,
        max_workers=get_settings().market_data_max_workers,
    )


def get_user_service(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
) -> UserService:
    """Provide UserService instance."""
    settings = get_settings()
    return UserService(
        user_repo=user_repo,
        starting_cash=settings.starting_cash,
        bcrypt_rounds=settings.bcrypt_rounds,
    )


def get_portfolio_ledger(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
) -> PortfolioLedger:
    """Provide PortfolioLedger instance."""
    return PortfolioLedger(user_repo=user_repo)


def get_trade_executor(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
    market_data_service: MarketDataService = Depends(get_market_data_service),
    ledger: PortfolioLedger = Depends(get_portfolio_ledger),
) -> TradeExecutor:
    """Provide TradeExecutor instance."""
    return TradeExecutor(
        user_repo=user_repo,
        market_data_service=market_data_service,
        ledger=ledger,
    )


def get_valuation_service(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
    market_data_service: MarketDataService = Depends(get_market_data_service),
) -> ValuationService:
    """Provide ValuationService instance."""
    return ValuationService(
        user_repo=user_repo,
        market_data_service=market_data_service,
    )
