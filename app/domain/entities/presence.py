"""Domain entity describing a live realtime connection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class PresenceEntry:
    """Last-known connection handle tracked for an online user."""

    user_id: str
    connection: Any
    joined_at: datetime


__all__ = ["PresenceEntry"]
