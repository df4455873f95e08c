import pytest

from billboard_marketplace.realtime.protocol import NotificationEvent
from billboard_marketplace.realtime.protocol import UserOffline
from billboard_marketplace.realtime.protocol import UserOnline
from billboard_marketplace.realtime.registry import ConnectionRegistry
from billboard_marketplace.realtime.registry import Delivery

NOTE = NotificationEvent(
    id=1,
    type="system",
    title="t",
    message="m",
    created_at="2024-01-01T00:00:00+00:00",
)


@pytest.fixture
def registry():
    return ConnectionRegistry()


def _connect(registry, sid, user_id=None):
    registry.connect(sid)
    if user_id is None:
        return []
    return registry.authenticate(sid, user_id)


class TestPresence:
    def test_online_while_any_connection_lives(self, registry):
        _connect(registry, "a1", 1)
        _connect(registry, "a2", 1)
        _connect(registry, "a3", 1)
        registry.disconnect("a2")
        assert registry.is_online(1)
        registry.disconnect("a1")
        assert registry.is_online(1)
        registry.disconnect("a3")
        assert not registry.is_online(1)
        assert registry.online_user_ids() == frozenset()

    def test_first_connection_announces_online_to_others(self, registry):
        _connect(registry, "watcher")
        _connect(registry, "other", 2)
        deliveries = _connect(registry, "a1", 1)
        assert deliveries == [
            Delivery("other", UserOnline(1)),
            Delivery("watcher", UserOnline(1)),
        ]
        # A second tab is not a presence transition
        assert _connect(registry, "a2", 1) == []

    def test_last_disconnect_announces_offline(self, registry):
        _connect(registry, "watcher")
        _connect(registry, "a1", 1)
        _connect(registry, "a2", 1)
        assert registry.disconnect("a1") == []
        assert registry.disconnect("a2") == [Delivery("watcher", UserOffline(1))]

    def test_anonymous_disconnect_is_silent(self, registry):
        _connect(registry, "watcher", 9)
        _connect(registry, "anon")
        assert registry.disconnect("anon") == []
        assert "anon" not in registry
        assert len(registry) == 1

    def test_reauthenticate_as_other_user_moves_presence(self, registry):
        _connect(registry, "watcher")
        _connect(registry, "s1", 1)
        deliveries = registry.authenticate("s1", 2)
        assert Delivery("watcher", UserOffline(1)) in deliveries
        assert Delivery("watcher", UserOnline(2)) in deliveries
        assert not registry.is_online(1)
        assert registry.is_online(2)

    def test_authenticate_same_user_twice_is_noop(self, registry):
        _connect(registry, "watcher")
        _connect(registry, "s1", 1)
        assert registry.authenticate("s1", 1) == []
        assert registry.connections_for_user(1) == frozenset({"s1"})

    def test_unknown_sid_is_tolerated(self, registry):
        assert registry.authenticate("ghost", 1) == []
        assert registry.disconnect("ghost") == []
        assert not registry.join_room("ghost", "c1")
        assert not registry.is_online(1)


class TestDelivery:
    def test_deliver_to_offline_user_is_empty(self, registry):
        assert registry.deliver_to_user(42, NOTE) == []

    def test_deliver_to_every_connection_of_user(self, registry):
        _connect(registry, "a1", 1)
        _connect(registry, "a2", 1)
        _connect(registry, "b1", 2)
        deliveries = registry.deliver_to_user(1, NOTE)
        assert {d.sid for d in deliveries} == {"a1", "a2"}
        assert all(d.message is NOTE for d in deliveries)

    def test_room_delivery_excludes_sender(self, registry):
        _connect(registry, "a1", 1)
        _connect(registry, "b1", 2)
        registry.join_room("a1", "c1")
        registry.join_room("b1", "c1")
        deliveries = registry.deliver_to_room("c1", NOTE, exclude_sid="a1")
        assert [d.sid for d in deliveries] == ["b1"]


class TestRooms:
    def test_join_twice_is_idempotent(self, registry):
        _connect(registry, "a1", 1)
        assert registry.join_room("a1", "c1") is True
        assert registry.join_room("a1", "c1") is False
        assert registry.rooms_for("a1") == frozenset({"c1"})
        assert len(registry.deliver_to_room("c1", NOTE)) == 1

    def test_unauthenticated_connection_may_join(self, registry):
        _connect(registry, "anon")
        assert registry.join_room("anon", "c1")
        assert registry.user_for("anon") is None

    def test_leave_and_disconnect_clear_membership(self, registry):
        _connect(registry, "a1", 1)
        _connect(registry, "a2", 1)
        registry.join_room("a1", "c1")
        registry.join_room("a2", "c1")
        assert registry.leave_room("a1", "c1")
        assert not registry.leave_room("a1", "c1")
        registry.disconnect("a2")
        assert registry.deliver_to_room("c1", NOTE) == []
        assert registry.rooms_for("a2") == frozenset()
