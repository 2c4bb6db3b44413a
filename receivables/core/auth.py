from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from receivables.core.database import get_db
from receivables.core.errors import AuthenticationError
from receivables.models.user import User
from receivables.services.auth_service import AuthService


def _bearer_token(request: Request) -> str | None:
    """Return the raw token from the Authorization header, or None if absent."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = auth_header[7:].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")
    return token


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the user behind the bearer token; every mutating endpoint depends on this."""
    token = _bearer_token(request)
    if token is None:
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        return AuthService(db).verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=e.message) from None


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    """Like get_current_user, but anonymous requests are allowed.

    A token that is present but invalid is still rejected.
    """
    token = _bearer_token(request)
    if token is None:
        return None
    try:
        return AuthService(db).verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=e.message) from None
