"""Tests for the notification write path and owner-scoped read operations."""

from __future__ import annotations

import importlib
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.exc import OperationalError

from app.application.use_cases.notifications import (
    create_notification,
    delete_notification,
    get_unread_count,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from app.domain.entities import (
    NotificationType,
    ProfileViewedData,
    ReviewReceivedData,
)
from app.infrastructure.notifications import serialize_notification
from app.infrastructure.repositories import NotificationRepository
from app.utils import datetime as datetime_utils

create_notification_module = importlib.import_module(
    "app.application.use_cases.notifications.create_notification"
)


class _SpyPublisher:
    def __init__(self, *, fail: bool = False) -> None:
        self.dispatched = []
        self.fail = fail

    def dispatch(self, notification) -> bool:
        self.dispatched.append(notification)
        if self.fail:
            raise RuntimeError("WebSocketService not initialized")
        return True


def _create(session, user, publisher, **overrides):
    fields = {
        "user_id": user.id,
        "title": "Heads up",
        "message": "Something happened",
        "type": NotificationType.SYSTEM_UPDATE,
    }
    fields.update(overrides)
    return create_notification(session, publisher=publisher, **fields)


def test_created_notification_is_listed_newest_first(
    session, make_user, sent_emails, ticking_clock
):
    user = make_user("ada")
    publisher = _SpyPublisher()

    first = _create(session, user, publisher, title="First")
    second = _create(session, user, publisher, title="Second")

    page = list_notifications(session, user.id)

    assert [n.id for n in page.notifications] == [second.id, first.id]
    assert page.pagination.total == 2
    assert first.read is False
    assert first.recipient is not None and first.recipient.username == "ada"


def test_offline_recipient_still_gets_the_notification(session, make_user, publisher):
    user = make_user("offline")

    notification = _create(session, user, publisher)

    assert publisher.gateway.is_user_online(user.id) is False
    stored = list_notifications(session, user.id).notifications
    assert [n.id for n in stored] == [notification.id]


def test_push_failure_does_not_fail_creation(session, make_user, caplog):
    user = make_user("grace")
    publisher = _SpyPublisher(fail=True)

    with caplog.at_level("WARNING"):
        notification = _create(session, user, publisher)

    assert notification.id is not None
    assert get_unread_count(session, user.id) == 1
    assert "Realtime delivery" in caplog.text


def test_persistence_failure_propagates_without_delivery(
    session, make_user, sent_emails, monkeypatch
):
    user = make_user("linus", email="linus@example.com")
    publisher = _SpyPublisher()

    def _broken_create(self, notification):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(NotificationRepository, "create", _broken_create)

    with pytest.raises(OperationalError):
        _create(session, user, publisher, type=NotificationType.REVIEW_RECEIVED)

    assert publisher.dispatched == []
    assert sent_emails == []


def test_ordering_survives_daylight_saving_fall_back(session, make_user, monkeypatch):
    user = make_user("night-owl")
    new_york = ZoneInfo("America/New_York")
    monkeypatch.setattr(datetime_utils, "get_app_timezone", lambda: new_york)

    # 01:30 EDT, then 01:10 EST forty minutes later.
    instants = iter(
        [
            datetime(2024, 11, 3, 5, 30, tzinfo=timezone.utc),
            datetime(2024, 11, 3, 6, 10, tzinfo=timezone.utc),
        ]
    )
    monkeypatch.setattr(create_notification_module, "now_utc", lambda: next(instants))

    earlier = _create(session, user, _SpyPublisher(), title="earlier")
    later = _create(session, user, _SpyPublisher(), title="later")

    stored = list_notifications(session, user.id).notifications
    assert [n.title for n in stored] == ["later", "earlier"]
    assert stored[1].created_at == datetime(2024, 11, 3, 5, 30, tzinfo=timezone.utc)
    assert stored[0].created_at.utcoffset() == timedelta(hours=-5)
    assert earlier.created_at.utcoffset() == timedelta(hours=-4)
    assert later.created_at > earlier.created_at
    assert serialize_notification(later)["createdAt"] == "2024-11-03T01:10:00-05:00"


def test_email_is_only_sent_for_allow_listed_types(session, make_user, sent_emails):
    user = make_user("margaret", email="margaret@example.com")
    publisher = _SpyPublisher()

    _create(
        session,
        user,
        publisher,
        type=NotificationType.REVIEW_RECEIVED,
        title="New Review Received",
    )
    assert get_unread_count(session, user.id) == 1
    assert sent_emails == [
        ("margaret@example.com", "New Review Received", "Something happened")
    ]

    _create(session, user, publisher, type=NotificationType.PROJECT_LIKED)
    assert len(sent_emails) == 1
    assert get_unread_count(session, user.id) == 2


def test_email_failure_is_swallowed(session, make_user, monkeypatch, caplog):
    user = make_user("barbara", email="barbara@example.com")

    def _explode(*_args):
        raise ConnectionError("smtp down")

    monkeypatch.setattr(create_notification_module, "send_notification_email", _explode)

    with caplog.at_level("ERROR"):
        notification = _create(
            session, user, _SpyPublisher(), type=NotificationType.PROJECT_VIEWED
        )

    assert notification.id is not None
    assert "Error sending email" in caplog.text


def test_missing_email_address_skips_email(session, make_user, sent_emails):
    user = make_user("noemail")

    _create(session, user, _SpyPublisher(), type=NotificationType.REVIEW_RECEIVED)

    assert sent_emails == []


def test_typed_payload_is_stored_as_json(session, make_user):
    user = make_user("ken")

    notification = _create(
        session,
        user,
        _SpyPublisher(),
        type=NotificationType.PROFILE_VIEWED,
        data=ProfileViewedData(viewer_name="Dennis Ritchie"),
    )

    assert notification.data == {"viewer_name": "Dennis Ritchie"}


def test_payload_of_another_type_is_rejected_before_persisting(session, make_user):
    user = make_user("bjarne")
    publisher = _SpyPublisher()

    with pytest.raises(ValueError):
        _create(
            session,
            user,
            publisher,
            type=NotificationType.PROJECT_LIKED,
            data=ReviewReceivedData(rating=5, project_title="X", reviewer_name="Y"),
        )

    assert get_unread_count(session, user.id) == 0
    assert publisher.dispatched == []


def test_mark_read_is_idempotent(session, make_user):
    user = make_user("alan")
    notification = _create(session, user, _SpyPublisher())

    assert mark_notification_read(session, notification.id, user.id) == 1
    mark_notification_read(session, notification.id, user.id)

    stored = NotificationRepository(session).get(notification.id)
    assert stored.read is True
    assert get_unread_count(session, user.id) == 0


def test_mark_read_on_someone_elses_notification_is_a_no_op(session, make_user):
    owner = make_user("owner")
    intruder = make_user("intruder")
    notification = _create(session, owner, _SpyPublisher())

    assert mark_notification_read(session, notification.id, intruder.id) == 0
    assert delete_notification(session, notification.id, intruder.id) == 0

    stored = list_notifications(session, owner.id).notifications
    assert [(n.id, n.read) for n in stored] == [(notification.id, False)]


def test_unknown_notification_id_is_a_no_op(session, make_user):
    user = make_user("ghost")

    assert mark_notification_read(session, "missing", user.id) == 0
    assert delete_notification(session, "missing", user.id) == 0


def test_unread_count_tracks_read_operations(session, make_user):
    user = make_user("edsger")
    other = make_user("tony")
    publisher = _SpyPublisher()

    created = [_create(session, user, publisher) for _ in range(3)]
    _create(session, other, publisher)
    assert get_unread_count(session, user.id) == 3

    mark_notification_read(session, created[0].id, user.id)
    assert get_unread_count(session, user.id) == 2

    assert mark_all_notifications_read(session, user.id) == 2
    assert get_unread_count(session, user.id) == 0
    assert get_unread_count(session, other.id) == 1

    _create(session, user, publisher)
    assert get_unread_count(session, user.id) == 1


def test_delete_removes_only_the_owners_notification(session, make_user):
    user = make_user("john")
    notification = _create(session, user, _SpyPublisher())

    assert delete_notification(session, notification.id, user.id) == 1
    assert list_notifications(session, user.id).notifications == []


def test_pagination_metadata(session, make_user, ticking_clock):
    user = make_user("donald")
    publisher = _SpyPublisher()
    for index in range(5):
        _create(session, user, publisher, title=f"n{index}")

    first = list_notifications(session, user.id, page=1, limit=2)
    last = list_notifications(session, user.id, page=3, limit=2)

    assert [n.title for n in first.notifications] == ["n4", "n3"]
    assert first.pagination.total_pages == 3
    assert first.pagination.has_next is True
    assert first.pagination.has_prev is False
    assert [n.title for n in last.notifications] == ["n0"]
    assert last.pagination.has_next is False
    assert last.pagination.has_prev is True


def test_pagination_arguments_are_clamped(session, make_user):
    user = make_user("clamp")

    page = list_notifications(session, user.id, page=0, limit=1000)

    assert page.pagination.page == 1
    assert page.pagination.limit == 100
    assert page.pagination.total_pages == 0
