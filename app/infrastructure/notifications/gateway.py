"""Websocket gateway that authenticates clients and fans out events per user."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Iterable, Set

from anyio import to_thread
from fastapi import WebSocket
from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure import database
from app.infrastructure.repositories import NotificationRepository, UserRepository
from app.infrastructure.security import user_id_from_token
from app.utils import now_in_app_timezone

from .presence import PresenceRegistry

logger = logging.getLogger(__name__)

NOTIFICATION_NEW_EVENT = "notification:new"
NOTIFICATION_READ_EVENT = "notification:read"
NOTIFICATION_READ_ALL_EVENT = "notification:readAll"
NOTIFICATION_ALL_READ_EVENT = "notification:allRead"
PING_EVENT = "ping"
PONG_EVENT = "pong"


class AuthenticationError(Exception):
    """Raised when a realtime handshake cannot be authenticated."""


def _default_session() -> Session:
    return database.SessionLocal()


class RealtimeGateway:
    """Manage authenticated websocket connections grouped by user.

    Each user owns a broadcast group holding every socket opened with their
    token, so all of their devices receive the same events. The injected
    :class:`PresenceRegistry` tracks one handle per user and is kept in sync
    with the groups: a user is online while their group is not empty.
    """

    def __init__(
        self,
        presence: PresenceRegistry | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        self._presence = presence if presence is not None else PresenceRegistry()
        self._session_factory = session_factory or _default_session
        self._groups: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    @property
    def presence(self) -> PresenceRegistry:
        return self._presence

    def authenticate(self, token: str | None) -> User:
        """Resolve ``token`` to an existing user or raise :class:`AuthenticationError`."""

        try:
            user_id = user_id_from_token(token)
        except ValueError as exc:
            raise AuthenticationError("Authentication error") from exc

        with self._session_factory() as session:
            user = UserRepository(session).get(user_id)
        if user is None:
            raise AuthenticationError("Authentication error")
        return user

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        """Accept ``websocket`` and join it to the broadcast group of ``user_id``."""

        await websocket.accept()
        self._groups[user_id].add(websocket)
        self._presence.register(user_id, websocket)
        logger.info("User %s connected (%d online)", user_id, self.online_count())
        await to_thread.run_sync(self._touch_last_active, user_id)

    async def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        self._leave(user_id, websocket)
        logger.info("User %s disconnected (%d online)", user_id, self.online_count())
        await to_thread.run_sync(self._touch_last_active, user_id)

    async def send_to_user(
        self, user_id: str, event: str, payload: Any = None
    ) -> int:
        """Emit ``event`` to every socket of ``user_id``.

        Returns the number of sockets reached; an empty group is a silent
        no-op. Sockets that fail to send are dropped from the group.
        """

        connections = list(self._groups.get(user_id, ()))
        if not connections:
            logger.debug("User %s is offline; %s not pushed", user_id, event)
            return 0

        message = {"type": event, "data": payload}
        delivered = 0
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception:
                logger.warning(
                    "Dropping realtime connection of user %s after a failed send",
                    user_id,
                    exc_info=True,
                )
                self._leave(user_id, connection)
            else:
                delivered += 1
        return delivered

    async def send_to_users(
        self, user_ids: Iterable[str], event: str, payload: Any = None
    ) -> int:
        """Emit ``event`` to each of ``user_ids`` once, skipping empty and repeated ids."""

        seen: Set[str] = set()
        delivered = 0
        for user_id in user_ids:
            if not user_id or user_id in seen:
                continue
            seen.add(user_id)
            delivered += await self.send_to_user(user_id, event, payload)
        return delivered

    async def broadcast_all(self, event: str, payload: Any = None) -> int:
        delivered = 0
        for user_id in list(self._groups):
            delivered += await self.send_to_user(user_id, event, payload)
        return delivered

    def is_user_online(self, user_id: str) -> bool:
        return self._presence.is_online(user_id)

    def online_count(self) -> int:
        return self._presence.count()

    async def handle_message(
        self, user_id: str, websocket: WebSocket, message: Any
    ) -> None:
        """Process one inbound client event for the authenticated ``user_id``."""

        if not isinstance(message, dict):
            return

        event = message.get("type")
        if event == PING_EVENT:
            await websocket.send_json({"type": PONG_EVENT})
        elif event == NOTIFICATION_READ_EVENT:
            notification_id = message.get("data")
            if not isinstance(notification_id, str) or not notification_id:
                return
            try:
                await to_thread.run_sync(self._mark_read, user_id, notification_id)
            except Exception:
                logger.exception(
                    "Error marking notification %s as read for user %s",
                    notification_id,
                    user_id,
                )
        elif event == NOTIFICATION_READ_ALL_EVENT:
            try:
                await to_thread.run_sync(self._mark_all_read, user_id)
            except Exception:
                logger.exception(
                    "Error marking all notifications as read for user %s", user_id
                )
                return
            await websocket.send_json({"type": NOTIFICATION_ALL_READ_EVENT, "data": {}})

    def _leave(self, user_id: str, websocket: WebSocket) -> None:
        connections = self._groups.get(user_id)
        if connections is not None:
            connections.discard(websocket)
            if not connections:
                self._groups.pop(user_id, None)

        remaining = self._groups.get(user_id)
        if not remaining:
            self._presence.unregister(user_id)
            return
        entry = self._presence.get(user_id)
        if entry is None or entry.connection is websocket:
            self._presence.register(user_id, next(iter(remaining)))

    def _touch_last_active(self, user_id: str) -> None:
        try:
            with self._session_factory() as session:
                UserRepository(session).touch_last_active(user_id, now_in_app_timezone())
        except Exception:
            logger.warning("Error updating last active for user %s", user_id, exc_info=True)

    def _mark_read(self, user_id: str, notification_id: str) -> int:
        with self._session_factory() as session:
            return NotificationRepository(session).mark_as_read(
                notification_id, user_id=user_id
            )

    def _mark_all_read(self, user_id: str) -> int:
        with self._session_factory() as session:
            return NotificationRepository(session).mark_all_as_read(user_id)


__all__ = [
    "AuthenticationError",
    "NOTIFICATION_ALL_READ_EVENT",
    "NOTIFICATION_NEW_EVENT",
    "NOTIFICATION_READ_ALL_EVENT",
    "NOTIFICATION_READ_EVENT",
    "PING_EVENT",
    "PONG_EVENT",
    "RealtimeGateway",
]
