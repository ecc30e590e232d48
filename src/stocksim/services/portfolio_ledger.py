"""Portfolio ledger: the single point where cash and holdings change."""

from dataclasses import replace
from decimal import Decimal

from stocksim.core.exceptions import (
    InsufficientFundsError,
    InsufficientSharesError,
    NoSuchHoldingError,
    PersistenceFailureError,
)
from stocksim.core.timezone import now_eastern
from stocksim.core.validation import check_price, check_shares, format_shares, normalize_symbol
from stocksim.domain.models import User, Holding, HoldingUpdate
from stocksim.repositories.protocols import UserRepository


class PortfolioLedger:
    """
    Applies buys and sells to a user's cash and holdings.

    Each operation computes the new state of one holding plus the cash
    delta, writes both through a single atomic store call, and only then
    updates the in-memory User. A failed operation leaves both untouched.
    If the stored position changed after the User was loaded, the store
    refuses the write and PersistenceFailureError is raised.
    """

    def __init__(self, user_repo: UserRepository):
        self._user_repo = user_repo

    def apply_buy(
        self,
        user: User,
        symbol: str,
        shares: Decimal,
        price_per_share: Decimal,
    ) -> HoldingUpdate:
        """
        Debit cash and add shares at price_per_share.

        New positions start with weighted average = price. Existing ones use
        newAvg = (oldAvg * oldShares + cost) / (oldShares + shares).
        """
        symbol = normalize_symbol(symbol)
        shares = check_shares(shares)
        price = check_price(price_per_share)
        cost = shares * price

        if cost > user.cash:
            raise InsufficientFundsError(symbol, format_shares(shares), cost, user.cash)

        existing = user.get_holding(symbol)
        if existing is None:
            holding = Holding(
                symbol=symbol,
                shares=shares,
                weighted_average_price=price,
                total_cost=cost,
                acquired_at_est=now_eastern(),
            )
        else:
            new_shares = existing.shares + shares
            holding = replace(
                existing,
                shares=new_shares,
                weighted_average_price=(
                    existing.weighted_average_price * existing.shares + cost
                ) / new_shares,
                total_cost=existing.total_cost + cost,
            )

        update = HoldingUpdate(
            symbol=symbol,
            cash_delta=-cost,
            holding=holding,
            expected_shares=existing.shares if existing else None,
        )
        self._commit(user, update, "Could not purchase stock")
        return update

    def apply_sell(
        self,
        user: User,
        symbol: str,
        shares: Decimal,
        price_per_share: Decimal,
    ) -> HoldingUpdate:
        """
        Credit cash and remove shares at price_per_share.

        Selling every share deletes the holding. A partial sale keeps the
        historical formula newAvg = (oldAvg * oldShares - proceeds) / remaining,
        which moves the average cost of the remaining shares whenever the
        sale price differs from the current average.
        """
        symbol = normalize_symbol(symbol)
        shares = check_shares(shares)
        price = check_price(price_per_share)
        proceeds = shares * price

        existing = user.get_holding(symbol)
        if existing is None:
            raise NoSuchHoldingError(symbol)
        if shares > existing.shares:
            raise InsufficientSharesError(symbol, shares, existing.shares)

        if shares == existing.shares:
            update = HoldingUpdate(
                symbol=symbol,
                cash_delta=proceeds,
                holding=None,
                expected_shares=existing.shares,
            )
        else:
            remaining = existing.shares - shares
            holding = replace(
                existing,
                shares=remaining,
                weighted_average_price=(
                    existing.weighted_average_price * existing.shares - proceeds
                ) / remaining,
                total_cost=existing.total_cost - proceeds,
            )
            update = HoldingUpdate(
                symbol=symbol,
                cash_delta=proceeds,
                holding=holding,
                expected_shares=existing.shares,
            )

        self._commit(user, update, "Could not sell stock")
        return update

    def _commit(self, user: User, update: HoldingUpdate, failure_message: str) -> None:
        affected = self._user_repo.apply_holding_update(user.user_id, update)
        if not affected:
            raise PersistenceFailureError(failure_message)

        user.cash += update.cash_delta
        others = [h for h in user.holdings if h.symbol != update.symbol]
        if update.removed:
            user.holdings = others
        else:
            # Keep the holding in its original position when it already existed
            position = next(
                (i for i, h in enumerate(user.holdings) if h.symbol == update.symbol),
                len(others),
            )
            others.insert(position, update.holding)
            user.holdings = others
