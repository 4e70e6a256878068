from app.infrastructure.notifications import PresenceRegistry


def test_register_replaces_previous_connection():
    registry = PresenceRegistry()
    first, second = object(), object()

    registry.register("u1", first)
    registry.register("u1", second)

    assert registry.is_online("u1")
    assert registry.count() == 1
    assert registry.get("u1").connection is second


def test_unregister_unknown_user_is_a_no_op():
    registry = PresenceRegistry()

    assert registry.unregister("nobody") is False
    assert registry.count() == 0


def test_stale_connection_does_not_evict_newer_one():
    registry = PresenceRegistry()
    old, new = object(), object()
    registry.register("u1", old)
    registry.register("u1", new)

    assert registry.unregister("u1", old) is False
    assert registry.is_online("u1")

    assert registry.unregister("u1", new) is True
    assert not registry.is_online("u1")


def test_count_tracks_users():
    registry = PresenceRegistry()
    registry.register("a", object())
    registry.register("b", object())
    registry.unregister("a")

    assert registry.count() == 1
    assert registry.is_online("b")
    assert registry.get("b").joined_at is not None
