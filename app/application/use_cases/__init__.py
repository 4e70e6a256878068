"""Aggregate application use cases."""

from .notifications import create_notification, list_notifications

__all__ = [
    "create_notification",
    "list_notifications",
]
