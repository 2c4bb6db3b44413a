"""Create (or reset the password of) a dashboard user.

Usage: python scripts/create_admin.py <username> <password>
"""

import sys

from receivables.core.database import SessionLocal, init_db
from receivables.repositories.user_repository import UserRepository, hash_password


def main(argv: list[str]) -> int:
    if len(argv) != 2 or not argv[0].strip() or not argv[1]:
        print("usage: create_admin.py <username> <password>", file=sys.stderr)
        return 2

    username, password = argv[0].strip(), argv[1]
    init_db()
    db = SessionLocal()
    try:
        repo = UserRepository(db)
        user = repo.get_by_username(username)
        if user is None:
            repo.create(username, password)
            print(f"Created user {username}")
        else:
            user.password_hash = hash_password(password)  # type: ignore[assignment]
            db.commit()
            print(f"Updated password for {username}")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
