"""ORM models used by the application infrastructure."""

from .user import UserModel
from .project import ProjectModel
from .review import ReviewModel
from .notification import NotificationModel

__all__ = [
    "UserModel",
    "ProjectModel",
    "ReviewModel",
    "NotificationModel",
]
