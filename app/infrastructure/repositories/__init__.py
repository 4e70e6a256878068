"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .project_repository import ProjectRepository
from .review_repository import ReviewRepository
from .user_repository import UserRepository

__all__ = [
    "NotificationRepository",
    "ProjectRepository",
    "ReviewRepository",
    "UserRepository",
]
