"""Realtime notification helpers for the infrastructure layer."""

from .gateway import (
    NOTIFICATION_ALL_READ_EVENT,
    NOTIFICATION_NEW_EVENT,
    NOTIFICATION_READ_ALL_EVENT,
    NOTIFICATION_READ_EVENT,
    AuthenticationError,
    RealtimeGateway,
)
from .presence import PresenceRegistry
from .publisher import NotificationPublisher, serialize_notification

realtime_gateway = RealtimeGateway(PresenceRegistry())
notification_publisher = NotificationPublisher(realtime_gateway)

__all__ = [
    "AuthenticationError",
    "NOTIFICATION_ALL_READ_EVENT",
    "NOTIFICATION_NEW_EVENT",
    "NOTIFICATION_READ_ALL_EVENT",
    "NOTIFICATION_READ_EVENT",
    "NotificationPublisher",
    "PresenceRegistry",
    "RealtimeGateway",
    "notification_publisher",
    "realtime_gateway",
    "serialize_notification",
]
