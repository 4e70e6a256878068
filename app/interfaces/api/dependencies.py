"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.database import get_db
from app.infrastructure.notifications import (
    NotificationPublisher,
    RealtimeGateway,
    notification_publisher,
    realtime_gateway,
)
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import user_id_from_token

# Tokens are issued by the accounts service; this API only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        user_id = user_id_from_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _credentials_exception()
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided bearer token."""

    return resolve_current_user(token, db)


def get_realtime_gateway() -> RealtimeGateway:
    return realtime_gateway


def get_notification_publisher() -> NotificationPublisher:
    return notification_publisher
