"""Single write path for notifications and their best-effort delivery."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import (
    EMAILABLE_NOTIFICATION_TYPES,
    Notification,
    NotificationData,
    NotificationType,
    payload_to_dict,
)
from app.infrastructure.email import send_notification_email
from app.infrastructure.notifications import (
    NotificationPublisher,
    notification_publisher,
)
from app.infrastructure.repositories import NotificationRepository, UserRepository
from app.utils import now_utc

logger = logging.getLogger(__name__)


def create_notification(
    session: Session,
    *,
    user_id: str,
    title: str,
    message: str,
    type: NotificationType | str,
    data: NotificationData | dict[str, Any] | None = None,
    project_id: str | None = None,
    review_id: str | None = None,
    triggered_by_id: str | None = None,
    publisher: NotificationPublisher | None = None,
) -> Notification:
    """Persist a notification, then push it live and email it when applicable.

    Persistence errors propagate to the caller and nothing is delivered.
    Once the row is stored, realtime and email delivery are attempted once
    each; their failures are logged and never change the return value.
    """

    notification_type = NotificationType(type)
    notification = Notification(
        id=None,
        user_id=user_id,
        title=title,
        message=message,
        type=notification_type,
        data=payload_to_dict(notification_type, data),
        read=False,
        project_id=project_id,
        review_id=review_id,
        triggered_by_id=triggered_by_id,
        created_at=now_utc(),
    )
    saved = NotificationRepository(session).create(notification)

    _push_realtime(saved, publisher or notification_publisher)
    _send_email_notification(session, saved)
    return saved


def _push_realtime(notification: Notification, publisher: NotificationPublisher) -> None:
    try:
        publisher.dispatch(notification)
    except Exception:
        logger.warning(
            "Realtime delivery of notification %s to user %s failed",
            notification.id,
            notification.user_id,
            exc_info=True,
        )


def _send_email_notification(session: Session, notification: Notification) -> bool:
    if notification.type not in EMAILABLE_NOTIFICATION_TYPES:
        return False

    try:
        email = notification.recipient.email if notification.recipient else None
        if email is None:
            recipient = UserRepository(session).get(notification.user_id)
            email = recipient.email if recipient else None
        if not email:
            logger.info(
                "User %s has no email address; skipping notification email",
                notification.user_id,
            )
            return False

        sent = send_notification_email(email, notification.title, notification.message)
    except Exception:
        logger.exception("Error sending email for notification %s", notification.id)
        return False

    if not sent:
        logger.warning("Notification email for %s was not delivered", notification.id)
    return sent


__all__ = ["create_notification"]
