"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationType


class UserSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None


class ProjectSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str


class NotificationRead(BaseModel):
    """Representation of a stored notification returned by the REST API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    data: dict[str, Any] = Field(default_factory=dict)
    read: bool
    project_id: str | None = None
    review_id: str | None = None
    triggered_by_id: str | None = None
    created_at: datetime
    project: ProjectSummaryRead | None = None
    triggered_by: UserSummaryRead | None = None


class PaginationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class NotificationListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notifications: list[NotificationRead]
    pagination: PaginationRead


class UnreadCountResponse(BaseModel):
    count: int


class MessageResponse(BaseModel):
    message: str


class TestNotificationRequest(BaseModel):
    """Optional overrides for the development-only test notification."""

    __test__ = False

    title: str | None = Field(default=None, max_length=200)
    message: str | None = None
    type: NotificationType | None = None


class TestNotificationResponse(BaseModel):
    __test__ = False

    message: str
    notification: NotificationRead


__all__ = [
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
