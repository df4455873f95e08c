"""Global Socket.IO server for the frontend.

This is intentionally domain-agnostic: presence, notifications, conversation
messages and billboard status updates all share the same Socket.IO server
instance.

Current frontend convention:
- URL base: ws://<host>:8000
- Socket.IO path: settings.REALTIME_SOCKETIO_PATH (``/ws/notifications/``)
- Auth: optional `query.token` or `auth.token` (JWT access token); the
  connection is bound to a user by the `authenticate` event.

Connection state lives in a ConnectionRegistry owned by the gateway, not in
Socket.IO rooms, so delivery to users and conversations goes through one
place and presence can be queried from Django code.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any
from urllib.parse import parse_qs

import socketio
import socketio.exceptions
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError

from billboard_marketplace.users.authentication import ActiveAccountJWTAuthentication

from .protocol import Authenticate
from .protocol import JoinRoom
from .protocol import LeaveRoom
from .protocol import ProtocolError
from .protocol import Typing
from .protocol import TypingIndicator
from .protocol import parse_client_message
from .registry import ConnectionRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .protocol import ClientMessage
    from .protocol import ServerMessage
    from .registry import Delivery

logger = logging.getLogger(__name__)

CLIENT_EVENTS = (Authenticate.event, JoinRoom.event, LeaveRoom.event, Typing.event)


@database_sync_to_async
def _get_user_id_from_access_token(token: str) -> int:
    jwt_auth = ActiveAccountJWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return int(user.id)


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    # Allow `auth: { token }` as fallback.
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


class RealtimeGateway:
    """Binds a Socket.IO server to a ConnectionRegistry.

    Incoming events are parsed into typed messages and dispatched by
    :meth:`handle_message`; registry results are emitted by :meth:`flush`.
    """

    def __init__(
        self,
        server: socketio.AsyncServer,
        registry: ConnectionRegistry | None = None,
        *,
        require_token: bool | None = None,
    ) -> None:
        self.server = server
        self.registry = registry if registry is not None else ConnectionRegistry()
        self._require_token = require_token

        server.on("connect", self.on_connect)
        server.on("disconnect", self.on_disconnect)
        for event in CLIENT_EVENTS:
            server.on(event, self._receiver(event))

    @property
    def require_token(self) -> bool:
        if self._require_token is not None:
            return self._require_token
        return bool(getattr(settings, "REALTIME_REQUIRE_TOKEN", False))

    # Transport lifecycle -----------------------------------------------------

    async def on_connect(
        self,
        sid: str,
        environ: dict[str, Any],
        auth: Any | None = None,
    ) -> None:
        token = _extract_token(environ, auth)
        verified_user_id: int | None = None
        if token:
            verified_user_id = await self._resolve_token(token)
        elif self.require_token:
            msg = "unauthorized"
            raise socketio.exceptions.ConnectionRefusedError(msg)

        await self.server.save_session(sid, {"user_id": verified_user_id})
        self.registry.connect(sid)
        logger.info("Socket connected: %s (token user %s)", sid, verified_user_id)

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        deliveries = self.registry.disconnect(sid)
        logger.info("Socket disconnected: %s (%s)", sid, reason)
        await self.flush(deliveries)

    async def _resolve_token(self, token: str) -> int:
        try:
            return await _get_user_id_from_access_token(token)
        except (TokenError, AuthenticationFailed) as exc:
            detail = getattr(exc, "detail", exc)
            if "expired" in str(detail).lower():
                msg = "jwt_expired"
                raise socketio.exceptions.ConnectionRefusedError(msg) from exc
            msg = "unauthorized"
            raise socketio.exceptions.ConnectionRefusedError(msg) from exc
        except Exception as exc:
            logger.exception("Socket.IO connect error")
            msg = "server_error"
            raise socketio.exceptions.ConnectionRefusedError(msg) from exc

    # Client messages ---------------------------------------------------------

    def _receiver(self, event: str):
        async def receive(sid: str, data: Any = None) -> None:
            await self.receive(sid, event, data)

        receive.__name__ = f"on_{event}"
        return receive

    async def receive(self, sid: str, event: str, data: Any) -> None:
        try:
            message = parse_client_message(event, data)
        except ProtocolError as exc:
            logger.warning("Ignoring %s from %s: %s", event, sid, exc)
            return
        await self.handle_message(sid, message)

    async def handle_message(self, sid: str, message: ClientMessage) -> None:
        deliveries: list[Delivery] = []
        if isinstance(message, Authenticate):
            deliveries = await self._authenticate(sid, message)
        elif isinstance(message, JoinRoom):
            if self.registry.join_room(sid, message.conversation_id):
                logger.info("%s joined conversation %s", sid, message.conversation_id)
        elif isinstance(message, LeaveRoom):
            if self.registry.leave_room(sid, message.conversation_id):
                logger.info("%s left conversation %s", sid, message.conversation_id)
        elif isinstance(message, Typing):
            deliveries = self._typing(sid, message)
        await self.flush(deliveries)

    def _typing(self, sid: str, message: Typing) -> list[Delivery]:
        user_id = self.registry.user_for(sid)
        if user_id is None:
            logger.warning("Ignoring typing from unauthenticated connection %s", sid)
            return []
        indicator = TypingIndicator(
            user_id=user_id,
            conversation_id=message.conversation_id,
            is_typing=message.is_typing,
        )
        return self.registry.deliver_to_room(
            message.conversation_id,
            indicator,
            exclude_sid=sid,
        )

    async def _authenticate(self, sid: str, message: Authenticate) -> list[Delivery]:
        session = await self.server.get_session(sid)
        verified = session.get("user_id") if isinstance(session, dict) else None
        if verified is not None and verified != message.user_id:
            logger.warning(
                "Socket %s authenticated as %s but its token belongs to %s",
                sid,
                message.user_id,
                verified,
            )
            return []
        deliveries = self.registry.authenticate(sid, message.user_id)
        logger.info("User %s authenticated on %s", message.user_id, sid)
        return deliveries

    # Outbound ----------------------------------------------------------------

    async def flush(self, deliveries: Iterable[Delivery]) -> None:
        for delivery in deliveries:
            # A connection torn down since the delivery was computed is dropped.
            if delivery.sid not in self.registry:
                continue
            await self.server.emit(
                delivery.message.event,
                delivery.message.to_wire(),
                to=delivery.sid,
            )

    async def send_to_user(self, user_id: int, message: ServerMessage) -> int:
        deliveries = self.registry.deliver_to_user(user_id, message)
        await self.flush(deliveries)
        return len(deliveries)

    async def send_to_room(self, room: str, message: ServerMessage) -> int:
        deliveries = self.registry.deliver_to_room(room, message)
        await self.flush(deliveries)
        return len(deliveries)

    def deliver_to_user(self, user_id: int, message: ServerMessage) -> int:
        """Deliver from sync Django code. Offline users are silently skipped."""

        deliveries = self.registry.deliver_to_user(user_id, message)
        if deliveries:
            async_to_sync(self.flush)(deliveries)
        return len(deliveries)

    def deliver_to_room(self, room: str, message: ServerMessage) -> int:
        deliveries = self.registry.deliver_to_room(room, message)
        if deliveries:
            async_to_sync(self.flush)(deliveries)
        return len(deliveries)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.REALTIME_CORS_ALLOWED_ORIGINS,
    logger=False,
    engineio_logger=False,
)

gateway = RealtimeGateway(sio)


def deliver_to_user(user_id: int, message: ServerMessage) -> int:
    return gateway.deliver_to_user(user_id, message)


def deliver_to_room(room: str, message: ServerMessage) -> int:
    return gateway.deliver_to_room(room, message)


def is_user_online(user_id: int) -> bool:
    return gateway.registry.is_online(user_id)
