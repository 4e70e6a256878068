"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from app.domain.entities import Notification
from app.utils import ensure_app_timezone, isoformat_or_none

from .gateway import NOTIFICATION_NEW_EVENT, RealtimeGateway

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery on the event loop.

    Delivery runs as its own task so the caller never waits on sockets; the
    task is kept referenced until it finishes and any error it raises is
    logged.
    """

    def __init__(self, gateway: RealtimeGateway) -> None:
        self._gateway = gateway
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def gateway(self) -> RealtimeGateway:
        return self._gateway

    def dispatch(self, notification: Notification) -> bool:
        """Schedule ``notification`` for its recipient.

        Returns ``False`` without scheduling anything when the recipient has
        no live connection. Raises ``RuntimeError`` when called outside both
        the event loop and an AnyIO worker thread.
        """

        if not self._gateway.is_user_online(notification.user_id):
            logger.info(
                "User %s is offline; notification %s kept in storage",
                notification.user_id,
                notification.id,
            )
            return False

        payload = serialize_notification(notification)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            from_thread.run_sync(self._spawn, notification.user_id, payload)
        else:
            self._spawn(notification.user_id, payload)
        return True

    def _spawn(self, user_id: str, payload: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(
            self._gateway.send_to_user(user_id, NOTIFICATION_NEW_EVENT, payload)
        )
        self._pending.add(task)
        task.add_done_callback(self._on_delivery_done)

    def _on_delivery_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Realtime notification delivery failed", exc_info=exc)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the ``notification:new`` payload for ``notification``."""

    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type.value,
        "data": notification.data or {},
        "createdAt": isoformat_or_none(ensure_app_timezone(notification.created_at)),
    }


__all__ = ["NotificationPublisher", "serialize_notification"]
