"""Account router - Registration, login and the current user's account"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ...utils.storage import generate_presigned_url
from .schemas import LoginRequest, SignupRequest, TokenResponse, UserResponse, UserUpdate
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])
users_router = APIRouter(prefix="/users", tags=["Users"])

signup_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="signup")
login_rate_limit = create_rate_limiter(limit=10, window_seconds=300, key_prefix="login")


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


def to_user_response(user: User) -> UserResponse:
    response = UserResponse.model_validate(user)
    response.profile_picture_url = generate_presigned_url(user.profile_picture_url)
    return response


@router.post("/signup", status_code=201)
async def signup(
    data: SignupRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(signup_rate_limit),
):
    """Register a new client or nanny account"""
    return await service.signup(data)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(login_rate_limit),
):
    return service.login(data.email, data.password)


@users_router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return to_user_response(current_user)


@users_router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Update name, phone and location of the current user"""
    return to_user_response(service.update_me(current_user, data))
