"""Domain entity representing a portfolio project."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Project:
    """Project published by a developer and open to peer review."""

    id: str | None
    author_id: str
    title: str
    likes: int = 0
    views: int = 0
    created_at: datetime | None = None


__all__ = ["Project"]
