"""Domain entities describing user notifications and their payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union


class NotificationType(str, Enum):
    """Closed set of notification kinds."""

    REVIEW_RECEIVED = "REVIEW_RECEIVED"
    REVIEW_APPROVED = "REVIEW_APPROVED"
    REVIEW_REJECTED = "REVIEW_REJECTED"
    PROJECT_LIKED = "PROJECT_LIKED"
    PROJECT_VIEWED = "PROJECT_VIEWED"
    PROFILE_VIEWED = "PROFILE_VIEWED"
    SYSTEM_UPDATE = "SYSTEM_UPDATE"
    WELCOME = "WELCOME"
    ACHIEVEMENT = "ACHIEVEMENT"


# Types that also trigger a notification email.
EMAILABLE_NOTIFICATION_TYPES: frozenset[NotificationType] = frozenset(
    {NotificationType.REVIEW_RECEIVED, NotificationType.PROJECT_VIEWED}
)

VIEW_MILESTONES: tuple[int, ...] = (100, 500, 1000, 5000, 10000)


@dataclass(frozen=True)
class ReviewReceivedData:
    notification_type: ClassVar[NotificationType] = NotificationType.REVIEW_RECEIVED

    rating: int
    project_title: str
    reviewer_name: str


@dataclass(frozen=True)
class ProjectLikedData:
    notification_type: ClassVar[NotificationType] = NotificationType.PROJECT_LIKED

    project_title: str
    liker_name: str
    total_likes: int


@dataclass(frozen=True)
class ProjectViewMilestoneData:
    notification_type: ClassVar[NotificationType] = NotificationType.PROJECT_VIEWED

    project_title: str
    view_count: int
    milestone: int


@dataclass(frozen=True)
class ProfileViewedData:
    notification_type: ClassVar[NotificationType] = NotificationType.PROFILE_VIEWED

    viewer_name: str


@dataclass(frozen=True)
class WelcomeData:
    notification_type: ClassVar[NotificationType] = NotificationType.WELCOME

    is_welcome: bool = True


@dataclass(frozen=True)
class SystemUpdateData:
    notification_type: ClassVar[NotificationType] = NotificationType.SYSTEM_UPDATE

    is_test: bool = False
    details: dict[str, Any] = field(default_factory=dict)


NotificationData = Union[
    ReviewReceivedData,
    ProjectLikedData,
    ProjectViewMilestoneData,
    ProfileViewedData,
    WelcomeData,
    SystemUpdateData,
]


def payload_to_dict(
    notification_type: NotificationType,
    data: NotificationData | dict[str, Any] | None,
) -> dict[str, Any]:
    """Return the JSON object stored for ``data``.

    Typed payloads must belong to ``notification_type``; plain mappings are
    accepted for the kinds that have no dedicated shape.
    """

    if data is None:
        return {}
    if isinstance(data, dict):
        return dict(data)
    expected = getattr(data, "notification_type", None)
    if expected is None:
        raise ValueError(f"Unsupported notification payload: {type(data).__name__}")
    if expected is not notification_type:
        raise ValueError(
            f"{type(data).__name__} belongs to {expected.value}, "
            f"not {notification_type.value}"
        )
    return asdict(data)


@dataclass
class UserSummary:
    """Minimal user details joined onto a notification."""

    id: str
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None


@dataclass
class ProjectSummary:
    id: str
    title: str


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: str | None
    user_id: str
    title: str
    message: str
    type: NotificationType
    data: dict[str, Any] = field(default_factory=dict)
    read: bool = False
    project_id: str | None = None
    review_id: str | None = None
    triggered_by_id: str | None = None
    created_at: datetime | None = None
    recipient: UserSummary | None = None
    project: ProjectSummary | None = None
    triggered_by: UserSummary | None = None


__all__ = [
    "EMAILABLE_NOTIFICATION_TYPES",
    "VIEW_MILESTONES",
    "Notification",
    "NotificationData",
    "NotificationType",
    "ProfileViewedData",
    "ProjectLikedData",
    "ProjectSummary",
    "ProjectViewMilestoneData",
    "ReviewReceivedData",
    "SystemUpdateData",
    "UserSummary",
    "WelcomeData",
    "payload_to_dict",
]
