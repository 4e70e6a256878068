"""Use case for paging through a user's notifications."""

from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.infrastructure.repositories import NotificationRepository

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True)
class NotificationPage:
    """Newest-first slice of notifications plus its pagination metadata."""

    notifications: list[Notification]
    pagination: Pagination


def list_notifications(
    session: Session,
    user_id: str,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> NotificationPage:
    """Return page ``page`` of the notifications owned by ``user_id``.

    ``page`` is clamped to at least 1 and ``limit`` to ``1..MAX_PAGE_SIZE``.
    """

    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    repository = NotificationRepository(session)
    total = repository.count_for_user(user_id)
    notifications = repository.list_for_user(
        user_id, offset=(page - 1) * limit, limit=limit
    )
    total_pages = math.ceil(total / limit)
    return NotificationPage(
        notifications=list(notifications),
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "NotificationPage",
    "Pagination",
    "list_notifications",
]
