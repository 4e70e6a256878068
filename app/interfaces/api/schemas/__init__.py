from .health import HealthRead
from .notification import (
    MessageResponse,
    NotificationListResponse,
    NotificationRead,
    PaginationRead,
    ProjectSummaryRead,
    TestNotificationRequest,
    TestNotificationResponse,
    UnreadCountResponse,
    UserSummaryRead,
)

__all__ = [
    "HealthRead",
    "MessageResponse",
    "NotificationListResponse",
    "NotificationRead",
    "PaginationRead",
    "ProjectSummaryRead",
    "TestNotificationRequest",
    "TestNotificationResponse",
    "UnreadCountResponse",
    "UserSummaryRead",
]
