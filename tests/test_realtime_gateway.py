"""Tests for the realtime gateway and the notification publisher."""

from __future__ import annotations

import anyio
import pytest

from app.application.use_cases.notifications import create_notification, get_unread_count
from app.domain.entities import NotificationType
from app.infrastructure.notifications import (
    NOTIFICATION_ALL_READ_EVENT,
    NOTIFICATION_NEW_EVENT,
    serialize_notification,
)
from app.infrastructure.repositories import UserRepository


class FakeWebSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.broken = broken

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(message)


@pytest.mark.anyio
async def test_connect_registers_presence_and_touches_last_active(
    gateway, make_user, session
):
    user = make_user("ada")
    socket = FakeWebSocket()

    await gateway.connect(user.id, socket)

    assert socket.accepted
    assert gateway.is_user_online(user.id)
    assert gateway.online_count() == 1
    session.expire_all()
    assert UserRepository(session).get(user.id).last_active is not None


@pytest.mark.anyio
async def test_send_to_offline_user_is_a_silent_no_op(gateway):
    assert await gateway.send_to_user("nobody", NOTIFICATION_NEW_EVENT, {}) == 0


@pytest.mark.anyio
async def test_every_device_of_a_user_receives_the_event(gateway, make_user):
    user = make_user("multi")
    phone, laptop = FakeWebSocket(), FakeWebSocket()
    await gateway.connect(user.id, phone)
    await gateway.connect(user.id, laptop)

    delivered = await gateway.send_to_user(user.id, NOTIFICATION_NEW_EVENT, {"id": "n1"})

    assert delivered == 2
    expected = {"type": NOTIFICATION_NEW_EVENT, "data": {"id": "n1"}}
    assert phone.sent == [expected]
    assert laptop.sent == [expected]
    assert gateway.online_count() == 1


@pytest.mark.anyio
async def test_closing_one_device_keeps_the_user_online(gateway, make_user):
    user = make_user("multi")
    phone, laptop = FakeWebSocket(), FakeWebSocket()
    await gateway.connect(user.id, phone)
    await gateway.connect(user.id, laptop)

    await gateway.disconnect(user.id, laptop)
    assert gateway.is_user_online(user.id)
    assert gateway.presence.get(user.id).connection is phone

    await gateway.disconnect(user.id, phone)
    assert not gateway.is_user_online(user.id)
    assert gateway.online_count() == 0


@pytest.mark.anyio
async def test_failing_socket_is_dropped(gateway, make_user):
    user = make_user("flaky")
    broken = FakeWebSocket(broken=True)
    await gateway.connect(user.id, broken)

    assert await gateway.send_to_user(user.id, NOTIFICATION_NEW_EVENT, {}) == 0
    assert not gateway.is_user_online(user.id)


@pytest.mark.anyio
async def test_broadcast_reaches_every_connection(gateway, make_user):
    first, second = make_user("one"), make_user("two")
    a, b = FakeWebSocket(), FakeWebSocket()
    await gateway.connect(first.id, a)
    await gateway.connect(second.id, b)

    assert await gateway.broadcast_all("system:maintenance", {"in": 5}) == 2
    assert a.sent == b.sent == [{"type": "system:maintenance", "data": {"in": 5}}]


@pytest.mark.anyio
async def test_send_to_users_reaches_each_user_once(gateway, make_user):
    first, second, offline = make_user("one"), make_user("two"), make_user("three")
    a, b = FakeWebSocket(), FakeWebSocket()
    await gateway.connect(first.id, a)
    await gateway.connect(second.id, b)

    delivered = await gateway.send_to_users(
        [first.id, second.id, first.id, "", offline.id], "project:updated", {"id": "p1"}
    )

    assert delivered == 2
    assert a.sent == [{"type": "project:updated", "data": {"id": "p1"}}]
    assert b.sent == [{"type": "project:updated", "data": {"id": "p1"}}]


@pytest.mark.anyio
async def test_read_events_only_touch_the_connection_owner(
    gateway, make_user, session, publisher
):
    owner = make_user("owner")
    other = make_user("other")
    mine = create_notification(
        session,
        user_id=owner.id,
        title="Mine",
        message="m",
        type=NotificationType.SYSTEM_UPDATE,
        publisher=publisher,
    )
    theirs = create_notification(
        session,
        user_id=other.id,
        title="Theirs",
        message="t",
        type=NotificationType.SYSTEM_UPDATE,
        publisher=publisher,
    )
    socket = FakeWebSocket()
    await gateway.connect(owner.id, socket)

    await gateway.handle_message(owner.id, socket, {"type": "notification:read", "data": theirs.id})
    await gateway.handle_message(owner.id, socket, {"type": "notification:read", "data": mine.id})

    session.expire_all()
    assert get_unread_count(session, owner.id) == 0
    assert get_unread_count(session, other.id) == 1


@pytest.mark.anyio
async def test_read_all_acknowledges_the_client(gateway, make_user, session, publisher):
    user = make_user("reader")
    for index in range(2):
        create_notification(
            session,
            user_id=user.id,
            title=f"n{index}",
            message="m",
            type=NotificationType.ACHIEVEMENT,
            publisher=publisher,
        )
    socket = FakeWebSocket()
    await gateway.connect(user.id, socket)
    socket.sent.clear()

    await gateway.handle_message(user.id, socket, {"type": "notification:readAll"})

    assert socket.sent == [{"type": NOTIFICATION_ALL_READ_EVENT, "data": {}}]
    session.expire_all()
    assert get_unread_count(session, user.id) == 0


@pytest.mark.anyio
async def test_malformed_messages_are_ignored(gateway, make_user):
    user = make_user("noisy")
    socket = FakeWebSocket()
    await gateway.connect(user.id, socket)

    await gateway.handle_message(user.id, socket, ["not", "a", "dict"])
    await gateway.handle_message(user.id, socket, {"type": "notification:read", "data": 42})
    await gateway.handle_message(user.id, socket, {"type": "unknown"})
    await gateway.handle_message(user.id, socket, {"type": "ping"})

    assert socket.sent == [{"type": "pong"}]


@pytest.mark.anyio
async def test_publisher_pushes_to_online_recipient(
    gateway, publisher, make_user, session
):
    user = make_user("online")
    socket = FakeWebSocket()
    await gateway.connect(user.id, socket)

    notification = create_notification(
        session,
        user_id=user.id,
        title="Live",
        message="pushed",
        type=NotificationType.SYSTEM_UPDATE,
        publisher=publisher,
    )
    for _ in range(10):
        if socket.sent:
            break
        await anyio.sleep(0.01)

    assert socket.sent == [
        {"type": NOTIFICATION_NEW_EVENT, "data": serialize_notification(notification)}
    ]
    payload = socket.sent[0]["data"]
    assert set(payload) == {"id", "title", "message", "type", "data", "createdAt"}
    assert payload["type"] == "SYSTEM_UPDATE"
