"""Public helpers for creating, reading and emitting notifications."""

from .create_notification import create_notification
from .delete_notification import delete_notification
from .events import (
    notify_profile_viewed,
    notify_project_liked,
    notify_project_view_milestone,
    notify_review_received,
    notify_review_status_changed,
    notify_welcome,
)
from .list_notifications import NotificationPage, Pagination, list_notifications
from .read_state import (
    get_unread_count,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "NotificationPage",
    "Pagination",
    "create_notification",
    "delete_notification",
    "get_unread_count",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "notify_profile_viewed",
    "notify_project_liked",
    "notify_project_view_milestone",
    "notify_review_received",
    "notify_review_status_changed",
    "notify_welcome",
]
