from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from receivables.core.auth import get_current_user
from receivables.core.config import settings
from receivables.core.database import get_db
from receivables.core.rate_limiter import RateLimiter
from receivables.models.user import User
from receivables.schemas.auth import LoginRequest, LoginResponse, UserResponse
from receivables.services.auth_service import AuthService

router = APIRouter()

login_rate_limiter = RateLimiter(max_requests=settings.LOGIN_RATE_LIMIT_PER_MINUTE)


def _check_login_rate_limit(request: Request) -> None:
    key = request.client.host if request.client else "unknown"
    if not login_rate_limiter.is_allowed(key):
        raise HTTPException(
            status_code=429,
            detail="Too many login attempts. Maximum "
            f"{login_rate_limiter.max_requests} attempts per minute.",
        )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    responses={
        400: {"description": "Username and password required"},
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many login attempts"},
    },
)
async def login(
    data: LoginRequest | None = None,
    db: Session = Depends(get_db),
    _: None = Depends(_check_login_rate_limit),
) -> LoginResponse:
    """Exchange a username and password for a bearer token."""
    data = data or LoginRequest()
    result = AuthService(db).authenticate(data.username, data.password)
    return LoginResponse(
        token=result.token,
        user=UserResponse.model_validate(result.user),
        message="Login successful",
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current user",
    responses={401: {"description": "Unauthorized – invalid or missing token"}},
)
async def me(user: User = Depends(get_current_user)) -> User:
    """Return the user the bearer token was issued to."""
    return user
