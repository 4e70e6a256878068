"""Use case for deleting a notification owned by the caller."""

from sqlalchemy.orm import Session

from app.infrastructure.repositories import NotificationRepository


def delete_notification(session: Session, notification_id: str, user_id: str) -> int:
    """Delete ``notification_id`` if it belongs to ``user_id``; return rows removed."""

    return NotificationRepository(session).delete(notification_id, user_id=user_id)
