"""User API: registration, login and profile."""

from fastapi import APIRouter, Depends

from stocksim.api.deps import get_user_service
from stocksim.api.schemas.user import (
    HoldingResponse,
    LoginResponse,
    PasswordChange,
    UserCreate,
    UserLogin,
    UserResponse,
)
from stocksim.domain.models import Holding, User
from stocksim.services import UserService

router = APIRouter(prefix="/users", tags=["users"])


def holding_to_response(holding: Holding) -> HoldingResponse:
    return HoldingResponse(
        symbol=holding.symbol,
        shares=float(holding.shares),
        weighted_average_price=float(holding.weighted_average_price),
        total_cost=float(holding.total_cost),
        acquired_at_est=holding.acquired_at_est,
    )


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        user_id=user.user_id,
        username=user.username,
        cash=float(user.cash),
        holdings=[holding_to_response(h) for h in user.holdings],
        created_at_est=user.created_at_est,
    )


@router.post("", response_model=UserResponse, status_code=201)
def register_user(data: UserCreate, svc: UserService = Depends(get_user_service)):
    """Register a new user with the starting cash balance."""
    return _user_to_response(svc.register(data.username, data.password))


@router.post("/login", response_model=LoginResponse)
def login(data: UserLogin, svc: UserService = Depends(get_user_service)):
    """Check a username/password pair."""
    user = svc.authenticate(data.username, data.password)
    return LoginResponse(authenticated=True, user_id=user.user_id, username=user.username)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, svc: UserService = Depends(get_user_service)):
    """Get a user's cash and holdings."""
    return _user_to_response(svc.get_user(user_id))


@router.put("/by-name/{username}/password", status_code=204)
def change_password(
    username: str,
    data: PasswordChange,
    svc: UserService = Depends(get_user_service),
):
    """Replace a user's password."""
    svc.change_password(username, data.new_password)
