from unittest import mock

import pytest
import socketio.exceptions
from asgiref.sync import async_to_sync
from rest_framework_simplejwt.exceptions import TokenError

from billboard_marketplace.realtime.protocol import NotificationEvent
from billboard_marketplace.realtime.registry import ConnectionRegistry
from billboard_marketplace.realtime.socketio import CLIENT_EVENTS
from billboard_marketplace.realtime.socketio import RealtimeGateway

TOKEN_LOOKUP = "billboard_marketplace.realtime.socketio._get_user_id_from_access_token"


class FakeServer:
    """Records handlers and emits the way python-socketio's AsyncServer exposes them."""

    def __init__(self):
        self.handlers = {}
        self.sessions = {}
        self.emit = mock.AsyncMock()

    def on(self, event, handler):
        self.handlers[event] = handler

    async def save_session(self, sid, session):
        self.sessions[sid] = session

    async def get_session(self, sid):
        return self.sessions.get(sid, {})


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def gateway(server):
    return RealtimeGateway(server, ConnectionRegistry(), require_token=False)


def connect(server, sid, *, environ=None, auth=None):
    async_to_sync(server.handlers["connect"])(sid, environ or {}, auth)


def send(server, sid, event, data):
    async_to_sync(server.handlers[event])(sid, data)


def emitted(server):
    return [(c.args[0], c.args[1], c.kwargs["to"]) for c in server.emit.await_args_list]


def test_registers_every_client_event(server, gateway):
    assert {"connect", "disconnect", *CLIENT_EVENTS} <= set(server.handlers)


def test_authenticate_broadcasts_presence(server, gateway):
    connect(server, "watcher")
    connect(server, "s1")
    send(server, "s1", "authenticate", {"userId": 5})
    assert gateway.registry.is_online(5)
    assert emitted(server) == [("userOnline", {"userId": 5}, "watcher")]

    async_to_sync(server.handlers["disconnect"])("s1", "transport close")
    assert not gateway.registry.is_online(5)
    assert emitted(server)[-1] == ("userOffline", {"userId": 5}, "watcher")


def test_malformed_event_is_ignored(server, gateway):
    connect(server, "s1")
    send(server, "s1", "authenticate", {"userId": "nope"})
    send(server, "s1", "joinRoom", None)
    assert gateway.registry.user_for("s1") is None
    assert gateway.registry.rooms_for("s1") == frozenset()
    server.emit.assert_not_awaited()


def test_typing_reaches_room_except_sender(server, gateway):
    for sid, user_id in (("s1", 1), ("s2", 2)):
        connect(server, sid)
        send(server, sid, "authenticate", {"userId": user_id})
        send(server, sid, "joinRoom", {"conversationId": "c1"})
    server.emit.reset_mock()

    send(server, "s1", "typing", {"conversationId": "c1", "isTyping": True})
    assert emitted(server) == [
        ("typing", {"userId": 1, "conversationId": "c1", "isTyping": True}, "s2"),
    ]


def test_typing_from_unauthenticated_connection_is_dropped(server, gateway):
    connect(server, "anon")
    connect(server, "member")
    send(server, "member", "authenticate", {"userId": 2})
    for sid in ("anon", "member"):
        send(server, sid, "joinRoom", {"conversationId": "c1"})
    server.emit.reset_mock()

    send(server, "anon", "typing", {"conversationId": "c1", "isTyping": True})
    server.emit.assert_not_awaited()


def test_token_user_must_match_authenticate(server, gateway):
    with mock.patch(TOKEN_LOOKUP, mock.AsyncMock(return_value=5)):
        connect(server, "s1", auth={"token": "access"})
    assert server.sessions["s1"] == {"user_id": 5}

    send(server, "s1", "authenticate", {"userId": 6})
    assert gateway.registry.user_for("s1") is None
    send(server, "s1", "authenticate", {"userId": 5})
    assert gateway.registry.user_for("s1") == 5


def test_token_read_from_query_string(server, gateway):
    lookup = mock.AsyncMock(return_value=8)
    with mock.patch(TOKEN_LOOKUP, lookup):
        connect(server, "s1", environ={"asgi.scope": {"query_string": b"token=abc"}})
    lookup.assert_awaited_once_with("abc")


def test_expired_token_refuses_connection(server, gateway):
    lookup = mock.AsyncMock(side_effect=TokenError("Token is expired"))
    with mock.patch(TOKEN_LOOKUP, lookup), pytest.raises(
        socketio.exceptions.ConnectionRefusedError,
    ) as exc_info:
        connect(server, "s1", auth={"token": "old"})
    assert exc_info.value.error_args["message"] == "jwt_expired"
    assert "s1" not in gateway.registry


def test_require_token_refuses_anonymous(server):
    RealtimeGateway(server, ConnectionRegistry(), require_token=True)
    with pytest.raises(socketio.exceptions.ConnectionRefusedError) as exc_info:
        connect(server, "s1")
    assert exc_info.value.error_args["message"] == "unauthorized"


def test_sync_delivery_to_offline_user_is_silent(server, gateway):
    note = NotificationEvent(1, "system", "t", "m", "2024-01-01T00:00:00+00:00")
    assert gateway.deliver_to_user(99, note) == 0
    server.emit.assert_not_awaited()


def test_sync_delivery_reaches_every_tab(server, gateway):
    for sid in ("s1", "s2"):
        connect(server, sid)
        send(server, sid, "authenticate", {"userId": 3})
    server.emit.reset_mock()
    note = NotificationEvent(1, "system", "t", "m", "2024-01-01T00:00:00+00:00")

    assert gateway.deliver_to_user(3, note) == 2
    assert [to for _, _, to in emitted(server)] == ["s1", "s2"]
    assert emitted(server)[0][1]["createdAt"] == "2024-01-01T00:00:00+00:00"


def test_flush_drops_deliveries_for_vanished_connections(server, gateway):
    connect(server, "s1")
    send(server, "s1", "authenticate", {"userId": 3})
    deliveries = gateway.registry.deliver_to_user(
        3,
        NotificationEvent(1, "system", "t", "m", "now"),
    )
    gateway.registry.disconnect("s1")
    server.emit.reset_mock()
    async_to_sync(gateway.flush)(deliveries)
    server.emit.assert_not_awaited()
