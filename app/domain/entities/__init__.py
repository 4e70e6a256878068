"""Domain entities exposed by the application."""

from .notification import (
    EMAILABLE_NOTIFICATION_TYPES,
    VIEW_MILESTONES,
    Notification,
    NotificationData,
    NotificationType,
    ProfileViewedData,
    ProjectLikedData,
    ProjectSummary,
    ProjectViewMilestoneData,
    ReviewReceivedData,
    SystemUpdateData,
    UserSummary,
    WelcomeData,
    payload_to_dict,
)
from .presence import PresenceEntry
from .project import Project
from .review import Review
from .user import User

__all__ = [
    "EMAILABLE_NOTIFICATION_TYPES",
    "VIEW_MILESTONES",
    "Notification",
    "NotificationData",
    "NotificationType",
    "PresenceEntry",
    "ProfileViewedData",
    "ProjectLikedData",
    "ProjectSummary",
    "ProjectViewMilestoneData",
    "Project",
    "Review",
    "ReviewReceivedData",
    "SystemUpdateData",
    "User",
    "UserSummary",
    "WelcomeData",
    "payload_to_dict",
]
