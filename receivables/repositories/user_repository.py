from uuid import UUID

from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from receivables.models.user import User


def hash_password(raw_password: str) -> str:
    """Salted scrypt hash in werkzeug's ``method$salt$hash`` form."""
    if not raw_password:
        raise ValueError("Password must not be empty")
    return generate_password_hash(raw_password, method="scrypt")


def verify_password(password_hash: str, raw_password: str) -> bool:
    if not password_hash or not raw_password:
        return False
    return check_password_hash(password_hash, raw_password)


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def create(self, username: str, raw_password: str) -> User:
        user = User(username=username, password_hash=hash_password(raw_password))
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def ensure(self, username: str, raw_password: str) -> tuple[User, bool]:
        """Return the user with this username, creating it if missing.

        The boolean is True when the user was created.
        """
        user = self.get_by_username(username)
        if user:
            return user, False
        return self.create(username, raw_password), True
