"""Persistence layer for user data."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.models import UserModel
from app.utils import ensure_utc_naive_datetime, ensure_app_timezone


class UserRepository:
    """Read users and record their realtime activity."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str | None) -> User | None:
        if not user_id:
            return None
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_username(self, username: str) -> User | None:
        model = (
            self.session.query(UserModel).filter(UserModel.username == username).first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar=user.avatar,
        )
        if user.id:
            model.id = user.id
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def touch_last_active(self, user_id: str, when: datetime) -> bool:
        """Store ``when`` as the last activity of ``user_id``.

        Returns ``False`` when the user no longer exists.
        """

        model = self.session.get(UserModel, user_id)
        if model is None:
            return False
        model.last_active = ensure_utc_naive_datetime(when)
        self.session.commit()
        return True

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            avatar=model.avatar,
            last_active=ensure_app_timezone(model.last_active),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
