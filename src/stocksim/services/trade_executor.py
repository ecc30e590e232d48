"""Trade execution: validation, pricing and ledger delegation."""

import logging
from decimal import Decimal

from stocksim.core.exceptions import InsufficientSharesError, NotFoundError
from stocksim.core.timezone import now_eastern
from stocksim.core.validation import (
    check_shares,
    check_user_id,
    normalize_symbol,
    pluralize_shares,
)
from stocksim.domain.models import HoldingUpdate, TradeSide, User
from stocksim.domain.views import TradeResult
from stocksim.repositories.protocols import UserRepository
from stocksim.services.market_data_service import MarketDataService
from stocksim.services.portfolio_ledger import PortfolioLedger

logger = logging.getLogger(__name__)


class TradeExecutor:
    """
    Executes market buys and sells at the current last-sale price.

    Input is validated before any I/O; the ledger is the only writer, so a
    failed validation or price lookup never mutates anything.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        market_data_service: MarketDataService,
        ledger: PortfolioLedger,
    ):
        self._user_repo = user_repo
        self._market = market_data_service
        self._ledger = ledger

    def buy(self, user_id: str, symbol: str, shares) -> TradeResult:
        """Buy shares of symbol for the user at the last-sale price."""
        user_id, symbol, shares = self._validate(user_id, symbol, shares)
        user = self._load_user(user_id)
        price = self._market.get_top(symbol).last_sale_price

        update = self._ledger.apply_buy(user, symbol, shares, price)
        logger.info("User %s bought %s %s @ %s", user.username, shares, symbol, price)
        return self._result(TradeSide.BUY, user, update, shares, price)

    def sell(self, user_id: str, symbol: str, shares) -> TradeResult:
        """Sell shares of symbol for the user at the last-sale price."""
        user_id, symbol, shares = self._validate(user_id, symbol, shares)
        user = self._load_user(user_id)
        price = self._market.get_top(symbol).last_sale_price

        try:
            update = self._ledger.apply_sell(user, symbol, shares, price)
        except InsufficientSharesError as exc:
            raise InsufficientSharesError(
                exc.symbol,
                exc.requested,
                exc.available,
                message=(
                    f"Cannot sell {pluralize_shares(exc.requested)} of {exc.symbol}. "
                    f"You only have {pluralize_shares(exc.available)}!"
                ),
            ) from exc
        logger.info("User %s sold %s %s @ %s", user.username, shares, symbol, price)
        return self._result(TradeSide.SELL, user, update, shares, price)

    @staticmethod
    def _validate(user_id, symbol, shares) -> tuple[str, str, Decimal]:
        return check_user_id(user_id), normalize_symbol(symbol), check_shares(shares)

    def _load_user(self, user_id: str) -> User:
        user = self._user_repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def _result(
        side: TradeSide,
        user: User,
        update: HoldingUpdate,
        shares: Decimal,
        price: Decimal,
    ) -> TradeResult:
        return TradeResult(
            success=True,
            side=side,
            symbol=update.symbol,
            shares=shares,
            price=price,
            amount=abs(update.cash_delta),
            cash_after=user.cash,
            holding=update.holding,
            executed_at_est=now_eastern(),
        )
