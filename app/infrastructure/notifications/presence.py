"""Process-local registry of users with a live realtime connection."""

from __future__ import annotations

from typing import Any

from app.domain.entities import PresenceEntry
from app.utils import now_in_app_timezone


class PresenceRegistry:
    """Map each online user id to its last-known connection handle.

    Only one entry is kept per user: registering again replaces the previous
    handle. The registry is mutated from the event loop only, so no locking
    is performed.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PresenceEntry] = {}

    def register(self, user_id: str, connection: Any) -> PresenceEntry:
        entry = PresenceEntry(
            user_id=user_id, connection=connection, joined_at=now_in_app_timezone()
        )
        self._entries[user_id] = entry
        return entry

    def unregister(self, user_id: str, connection: Any | None = None) -> bool:
        """Forget ``user_id``.

        When ``connection`` is given the entry is only removed if it still
        tracks that handle, so a stale socket cannot evict a newer one.
        """

        entry = self._entries.get(user_id)
        if entry is None:
            return False
        if connection is not None and entry.connection is not connection:
            return False
        del self._entries[user_id]
        return True

    def get(self, user_id: str) -> PresenceEntry | None:
        return self._entries.get(user_id)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._entries

    def count(self) -> int:
        return len(self._entries)


__all__ = ["PresenceRegistry"]
