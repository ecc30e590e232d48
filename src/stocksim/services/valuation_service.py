"""Valuation service for account values, leaderboard and portfolio report."""

from decimal import Decimal, ROUND_HALF_UP

from stocksim.core.exceptions import NotFoundError
from stocksim.core.validation import check_user_id
from stocksim.domain.models import User
from stocksim.domain.views import AccountValue, PortfolioRow
from stocksim.repositories.protocols import UserRepository
from stocksim.services.market_data_service import MarketDataService

_CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    """Round a currency figure to cents for presentation."""
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


class ValuationService:
    """
    Computes account value and per-holding gain/loss from live prices.

    Valuation is strict: a holding whose symbol can no longer be quoted
    makes the whole valuation fail instead of under-reporting.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        market_data_service: MarketDataService,
    ):
        self._user_repo = user_repo
        self._market = market_data_service

    def get_account_value(self, user_id: str) -> Decimal:
        """Cash plus last-sale value of every holding."""
        return self._value(self._load_user(user_id))

    def get_all_account_values(self) -> list[AccountValue]:
        """
        Value every user, highest first.

        Ties keep the store's listing order.
        """
        values = [
            AccountValue(username=user.username, account_value=self._value(user))
            for user in self._user_repo.list_all()
        ]
        return sorted(values, key=lambda v: v.account_value, reverse=True)

    def build_portfolio_report(self, user_id: str) -> list[PortfolioRow]:
        """One row per holding with today's and total gain/loss."""
        user = self._load_user(user_id)
        quotes = self._market.get_quotes([h.symbol for h in user.holdings])

        rows = []
        for holding in user.holdings:
            quote = quotes[holding.symbol]
            current_value = quote.latest_price * holding.shares
            rows.append(
                PortfolioRow(
                    symbol=holding.symbol,
                    latest_price=quote.latest_price,
                    today_gain_loss=_money(quote.change * holding.shares),
                    total_gain_loss=_money(current_value - holding.total_cost),
                    weighted_average_price=_money(holding.weighted_average_price),
                    current_value=_money(current_value),
                    shares=holding.shares,
                    cost_basis=_money(holding.total_cost),
                )
            )
        return rows

    def _value(self, user: User) -> Decimal:
        tops = self._market.get_tops([h.symbol for h in user.holdings])
        value = user.cash
        for holding in user.holdings:
            value += tops[holding.symbol].last_sale_price * holding.shares
        return value

    def _load_user(self, user_id: str) -> User:
        user_id = check_user_id(user_id)
        user = self._user_repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user
