"""Use cases reading and updating the read flag of notifications."""

from sqlalchemy.orm import Session

from app.infrastructure.repositories import NotificationRepository


def get_unread_count(session: Session, user_id: str) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_notification_read(session: Session, notification_id: str, user_id: str) -> int:
    """Mark one notification of ``user_id`` as read.

    A notification owned by another user, or an unknown id, matches zero
    rows; repeating the call on an already read notification is harmless.
    """

    return NotificationRepository(session).mark_as_read(notification_id, user_id=user_id)


def mark_all_notifications_read(session: Session, user_id: str) -> int:
    return NotificationRepository(session).mark_all_as_read(user_id)
