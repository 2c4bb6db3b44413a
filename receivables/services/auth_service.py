"""Credential checks and bearer-token issuance."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from sqlalchemy.orm import Session

from receivables.core.config import settings
from receivables.core.errors import AuthenticationError, ValidationError
from receivables.models.user import User
from receivables.repositories.user_repository import UserRepository, verify_password

logger = logging.getLogger(__name__)

TOKEN_TYPE = "access"


@dataclass
class LoginResult:
    token: str
    user: User


class AuthService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.user_repo = UserRepository(db)

    def authenticate(self, username: str | None, password: str | None) -> LoginResult:
        """Check a username/password pair and issue a token for the user.

        Raises ValidationError when either value is missing or blank and
        AuthenticationError when they do not match a stored user.
        """
        if not username or not password or not username.strip():
            raise ValidationError("Username and password required")

        user = self.user_repo.get_by_username(username.strip())
        if user is None or not verify_password(str(user.password_hash), password):
            logger.warning("Failed login attempt for %s", username)
            raise AuthenticationError("Invalid credentials")

        logger.info("User %s logged in", user.username)
        return LoginResult(token=self.generate_token(user), user=user)

    @staticmethod
    def generate_token(user: User) -> str:
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "username": user.username,
            "type": TOKEN_TYPE,
            "iat": datetime.now(UTC),
        }
        if settings.token_expiry_enabled:
            payload["exp"] = datetime.now(UTC) + timedelta(
                minutes=settings.ACCESS_TOKEN_TTL_MINUTES
            )
        return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")

    def verify_token(self, token: str) -> User:
        """Decode a bearer token and return the user it was issued to."""
        try:
            payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired") from None
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token") from None

        if payload.get("type") != TOKEN_TYPE:
            raise AuthenticationError("Invalid token")
        try:
            user_id = UUID(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token") from None

        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("Invalid token")
        return user

    def ensure_admin(self) -> User:
        """Seed the configured admin account if it does not exist yet."""
        user, created = self.user_repo.ensure(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        if created:
            logger.info("Created admin user %s", user.username)
        return user
