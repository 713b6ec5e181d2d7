"""CLI commands for Recipe Box."""

import argparse
import getpass
import sys

import bcrypt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.models.user import User
from app.services.auth.local_provider import MAX_PASSWORD_BYTES, password_too_long


def init_db() -> None:
    """Create all tables directly (local SQLite setups; use Alembic elsewhere)."""
    import app.models  # noqa: F401  (registers the models on Base.metadata)

    Base.metadata.create_all(bind=engine)
    print("Database tables created.")


def create_user(email: str, username: str, password: str | None = None) -> None:
    """Create a user account."""
    db: Session = SessionLocal()

    try:
        # Check if email or username already exists
        existing = (
            db.query(User)
            .filter(or_(User.email == email.lower(), User.username == username))
            .first()
        )
        if existing:
            print(f"Error: User with email '{email}' or username '{username}' already exists.")
            sys.exit(1)

        # Get password if not provided
        if not password:
            password = getpass.getpass("Password: ")
            password_confirm = getpass.getpass("Confirm password: ")
            if password != password_confirm:
                print("Error: Passwords do not match.")
                sys.exit(1)

        if len(password) < settings.password_min_length:
            print(f"Error: Password must be at least {settings.password_min_length} characters.")
            sys.exit(1)

        if password_too_long(password):
            print(f"Error: Password must be at most {MAX_PASSWORD_BYTES} bytes.")
            sys.exit(1)

        password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt()
        ).decode("utf-8")
        user = User(email=email.lower(), username=username, password_hash=password_hash)
        db.add(user)
        db.commit()

        print(f"User created successfully: {email}")

    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Recipe Box CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create database tables")

    # create-user command
    create_user_parser = subparsers.add_parser(
        "create-user", help="Create a user account"
    )
    create_user_parser.add_argument(
        "--email", required=True, help="Email address"
    )
    create_user_parser.add_argument(
        "--username", required=True, help="Username"
    )
    create_user_parser.add_argument(
        "--password", help="Password (will prompt if not provided)"
    )

    args = parser.parse_args()

    if args.command == "init-db":
        init_db()
    elif args.command == "create-user":
        create_user(args.email, args.username, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
