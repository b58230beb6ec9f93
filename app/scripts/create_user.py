"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [--role admin]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password --role admin
"""
import argparse
import logging
import sys

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from app.models.user import User, UserRole
from app.repositories.users import UserRepository

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a wardrobe user from the command line.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--first-name", default=None)
    parser.add_argument("--last-name", default=None)
    parser.add_argument("--role", default="user", choices=["user", "admin"])
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.LOG_LEVEL)

    username = args.username.strip()
    if not USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.exists_by_username(username):
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        if users.exists_by_email(args.email):
            print(f"Email '{args.email}' is already registered.", file=sys.stderr)
            return 1
        user = User.create(
            username=username,
            email=args.email,
            password_hash=hash_password(args.password, rounds=settings.BCRYPT_ROUNDS),
            first_name=args.first_name,
            last_name=args.last_name,
        )
        if args.role == "admin":
            user.promote_to_admin()
        users.save(user)
        role = UserRole(user.role).value
        logger.info("Created user %s with role %s", username, role)
        print(f"Created user '{username}' with role '{role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
