"""Helpers that turn domain events into notifications.

Each helper resolves the records it needs, skips the events that must not
notify anybody, and logs instead of raising so that the action which
triggered it (submitting a review, liking a project...) is never undone by
a notification problem.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.domain.entities import (
    VIEW_MILESTONES,
    Notification,
    NotificationType,
    ProfileViewedData,
    ProjectLikedData,
    ProjectViewMilestoneData,
    ReviewReceivedData,
    WelcomeData,
)
from app.infrastructure.notifications import NotificationPublisher
from app.infrastructure.repositories import (
    ProjectRepository,
    ReviewRepository,
    UserRepository,
)

from .create_notification import create_notification

logger = logging.getLogger(__name__)

_REVIEW_STATUS_TYPES = {
    "APPROVED": NotificationType.REVIEW_APPROVED,
    "REJECTED": NotificationType.REVIEW_REJECTED,
}


def notify_review_received(
    session: Session,
    *,
    review_id: str,
    project_author_id: str,
    reviewer_id: str,
    publisher: NotificationPublisher | None = None,
) -> Notification | None:
    """Tell the project author that ``reviewer_id`` reviewed their project."""

    try:
        context = ReviewRepository(session).get_with_context(review_id)
        if context is None:
            return None
        review, project, reviewer = context

        reviewer_name = reviewer.display_name
        return create_notification(
            session,
            user_id=project_author_id,
            title="New Review Received",
            message=f"{reviewer_name} reviewed your project",
            type=NotificationType.REVIEW_RECEIVED,
            data=ReviewReceivedData(
                rating=review.rating,
                project_title=project.title,
                reviewer_name=reviewer_name,
            ),
            project_id=review.project_id,
            review_id=review.id,
            triggered_by_id=reviewer_id,
            publisher=publisher,
        )
    except Exception:
        session.rollback()
        logger.exception("Error creating review notification for review %s", review_id)
        return None


def notify_review_status_changed(
    session: Session,
    *,
    review_id: str,
    status: str,
    changed_by_id: str,
    publisher: NotificationPublisher | None = None,
) -> Notification | None:
    """Tell the reviewer that the project author approved or rejected their review.

    Statuses other than ``APPROVED`` and ``REJECTED`` do not notify anybody.
    """

    status_key = (status or "").upper()
    notification_type = _REVIEW_STATUS_TYPES.get(status_key)
    if notification_type is None:
        return None

    try:
        context = ReviewRepository(session).get_with_context(review_id)
        if context is None:
            return None
        review, project, _reviewer = context

        status_text = status_key.lower()
        return create_notification(
            session,
            user_id=review.reviewer_id,
            title=f"Review {status_text}",
            message=f'Your review of "{project.title}" has been {status_text}',
            type=notification_type,
            project_id=review.project_id,
            review_id=review.id,
            triggered_by_id=changed_by_id,
            publisher=publisher,
        )
    except Exception:
        session.rollback()
        logger.exception(
            "Error creating review status notification for review %s", review_id
        )
        return None


def notify_profile_viewed(
    session: Session,
    *,
    profile_user_id: str,
    viewer_id: str | None,
    publisher: NotificationPublisher | None = None,
) -> Notification | None:
    """Tell ``profile_user_id`` that someone else looked at their profile."""

    if not viewer_id or viewer_id == profile_user_id:
        return None

    try:
        users = UserRepository(session)
        profile_user = users.get(profile_user_id)
        viewer = users.get(viewer_id)
        if profile_user is None or viewer is None:
            return None

        viewer_name = viewer.display_name
        return create_notification(
            session,
            user_id=profile_user_id,
            title="Profile View",
            message=f"{viewer_name} viewed your profile",
            type=NotificationType.PROFILE_VIEWED,
            data=ProfileViewedData(viewer_name=viewer_name),
            triggered_by_id=viewer_id,
            publisher=publisher,
        )
    except Exception:
        session.rollback()
        logger.exception(
            "Error creating profile view notification for user %s", profile_user_id
        )
        return None


def notify_project_liked(
    session: Session,
    *,
    project_id: str,
    project_author_id: str,
    liker_id: str,
    publisher: NotificationPublisher | None = None,
) -> Notification | None:
    if liker_id == project_author_id:
        return None

    try:
        project = ProjectRepository(session).get(project_id)
        liker = UserRepository(session).get(liker_id)
        if project is None or liker is None:
            return None

        liker_name = liker.display_name
        return create_notification(
            session,
            user_id=project_author_id,
            title="Project Liked!",
            message=f'{liker_name} liked your project "{project.title}".',
            type=NotificationType.PROJECT_LIKED,
            data=ProjectLikedData(
                project_title=project.title,
                liker_name=liker_name,
                total_likes=project.likes,
            ),
            project_id=project_id,
            triggered_by_id=liker_id,
            publisher=publisher,
        )
    except Exception:
        session.rollback()
        logger.exception("Error creating project like notification for %s", project_id)
        return None


def notify_project_view_milestone(
    session: Session,
    *,
    project_id: str,
    project_author_id: str,
    view_count: int,
    publisher: NotificationPublisher | None = None,
) -> Notification | None:
    """Celebrate ``view_count`` when it is exactly one of :data:`VIEW_MILESTONES`."""

    if view_count not in VIEW_MILESTONES:
        return None

    try:
        project = ProjectRepository(session).get(project_id)
        if project is None:
            return None

        return create_notification(
            session,
            user_id=project_author_id,
            title=f"{view_count} View Milestone!",
            message=(
                f'Your project "{project.title}" has reached {view_count} views! '
                "Keep up the great work!"
            ),
            type=NotificationType.PROJECT_VIEWED,
            data=ProjectViewMilestoneData(
                project_title=project.title,
                view_count=view_count,
                milestone=view_count,
            ),
            project_id=project_id,
            publisher=publisher,
        )
    except Exception:
        session.rollback()
        logger.exception("Error creating view milestone notification for %s", project_id)
        return None


def notify_welcome(
    session: Session,
    *,
    user_id: str,
    publisher: NotificationPublisher | None = None,
) -> Notification | None:
    try:
        user = UserRepository(session).get(user_id)
        if user is None:
            return None

        return create_notification(
            session,
            user_id=user_id,
            title=f"Welcome to DevFlow, {user.greeting_name}!",
            message=(
                "Start by creating your first project and connecting with other "
                "developers. Welcome to the community!"
            ),
            type=NotificationType.WELCOME,
            data=WelcomeData(),
            publisher=publisher,
        )
    except Exception:
        session.rollback()
        logger.exception("Error creating welcome notification for user %s", user_id)
        return None


__all__ = [
    "notify_profile_viewed",
    "notify_project_liked",
    "notify_project_view_milestone",
    "notify_review_received",
    "notify_review_status_changed",
    "notify_welcome",
]
