"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationType,
    ProjectSummary,
    UserSummary,
)
from app.infrastructure.models import NotificationModel, ProjectModel, UserModel
from app.utils import (
    ensure_app_timezone,
    ensure_utc_naive_datetime,
    now_utc,
)


class NotificationRepository:
    """Provide owner-scoped CRUD operations for :class:`Notification` objects.

    Every mutating method filters on ``user_id`` so that an identifier owned
    by somebody else simply matches zero rows.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: str,
        *,
        offset: int = 0,
        limit: int | None = 20,
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_for_user(self, user_id: str) -> int:
        return self._count(NotificationModel.user_id == user_id)

    def count_unread(self, user_id: str) -> int:
        return self._count(
            NotificationModel.user_id == user_id,
            NotificationModel.read.is_(False),
        )

    def create(self, notification: Notification) -> Notification:
        if not notification.user_id:
            raise ValueError("Notification recipient is required")
        model = NotificationModel(
            user_id=notification.user_id,
            title=notification.title,
            message=notification.message,
            type=NotificationType(notification.type),
            data=notification.data or {},
            read=False,
            project_id=notification.project_id,
            review_id=notification.review_id,
            triggered_by_id=notification.triggered_by_id,
            created_at=ensure_utc_naive_datetime(
                notification.created_at or now_utc()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str, *, user_id: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def mark_all_as_read(self, user_id: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def delete(self, notification_id: str, *, user_id: str) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _count(self, *criteria) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(*criteria)
            .scalar()
            or 0
        )

    @staticmethod
    def _user_summary(model: UserModel | None) -> UserSummary | None:
        if model is None:
            return None
        return UserSummary(
            id=model.id,
            username=model.username,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            avatar=model.avatar,
        )

    @staticmethod
    def _project_summary(model: ProjectModel | None) -> ProjectSummary | None:
        if model is None:
            return None
        return ProjectSummary(id=model.id, title=model.title)

    @classmethod
    def _to_entity(cls, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            message=model.message,
            type=NotificationType(model.type),
            data=model.data or {},
            read=bool(model.read),
            project_id=model.project_id,
            review_id=model.review_id,
            triggered_by_id=model.triggered_by_id,
            created_at=ensure_app_timezone(model.created_at),
            recipient=cls._user_summary(model.user),
            project=cls._project_summary(model.project),
            triggered_by=cls._user_summary(model.triggered_by),
        )


__all__ = ["NotificationRepository"]
