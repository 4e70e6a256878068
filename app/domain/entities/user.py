"""Domain entity representing a DevFlow user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Profile attributes of a user that the notification flow relies on."""

    id: str | None
    username: str
    email: str | None
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    last_active: datetime | None = None
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """Return ``"First Last"`` when both names are known, else the username."""

        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.username

    @property
    def greeting_name(self) -> str:
        return self.first_name or self.username


__all__ = ["User"]
