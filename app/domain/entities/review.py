"""Domain entity representing a peer review of a project."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Review:
    """Structured feedback left by a reviewer on someone else's project."""

    id: str | None
    project_id: str
    reviewer_id: str
    rating: int
    status: str = "PENDING"
    created_at: datetime | None = None


__all__ = ["Review"]
