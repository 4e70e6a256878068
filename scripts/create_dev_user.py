"""Create a local user, greet it with a welcome notification and print a token.

The printed token can be passed as ``?token=`` to ``/notifications/ws`` or as
a bearer token to the REST endpoints while developing.
"""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.notifications import notify_welcome
from app.domain.entities import User
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a development user for the DevFlow notification API.",
    )
    parser.add_argument("--username", default="devflow", help="Unique username")
    parser.add_argument(
        "--email",
        default=None,
        help="Email address used for notification emails (optional)",
    )
    parser.add_argument("--first-name", default=None)
    parser.add_argument("--last-name", default=None)
    parser.add_argument(
        "--no-welcome",
        action="store_true",
        help="Do not create the welcome notification.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    initialize_database()

    session = SessionLocal()
    try:
        repository = UserRepository(session)
        user = repository.get_by_username(args.username)
        if user is None:
            user = repository.create(
                User(
                    id=None,
                    username=args.username,
                    email=args.email,
                    first_name=args.first_name,
                    last_name=args.last_name,
                )
            )
            if not args.no_welcome:
                notify_welcome(session, user_id=user.id)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the user: {exc}") from exc
    finally:
        session.close()

    print(
        "User ready:\n"
        f"  ID: {user.id}\n"
        f"  Username: {user.username}\n"
        f"  Email: {user.email or '-'}\n"
        f"  Access token: {create_access_token(user.id)}"
    )


if __name__ == "__main__":
    main()
