"""Client side of the realtime channel.

``ConnectivityStateMachine`` holds the connection state and decides when the
authenticate/joinRoom handshake has to be (re)sent. The lifecycle itself is a
python-statemachine ``StateMachine``:

    disconnected -> connecting -> connected_unauthenticated -> connected_authenticated
         ^______________________________|_____________________________|

The server forgets a connection as soon as its transport closes, so every
transport-level open, including the transport's own automatic reconnects,
replays the handshake. ``RealtimeClient`` drives the machine from a
python-socketio ``AsyncClient``; reconnection timing is left to the library.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING
from typing import Any

import socketio
from statemachine import State
from statemachine import StateMachine

from .protocol import SERVER_EVENTS
from .protocol import Authenticate
from .protocol import JoinRoom
from .protocol import LeaveRoom
from .protocol import UserOffline
from .protocol import UserOnline

if TYPE_CHECKING:
    from collections.abc import Callable

    from .protocol import ClientMessage

logger = logging.getLogger(__name__)


class ConnectionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED_UNAUTHENTICATED = "connected_unauthenticated"
    CONNECTED_AUTHENTICATED = "connected_authenticated"


CONNECTED_STATES = frozenset(
    {ConnectionState.CONNECTED_UNAUTHENTICATED, ConnectionState.CONNECTED_AUTHENTICATED},
)


class ConnectionLifecycle(StateMachine):
    """Allowed transitions of one client connection."""

    disconnected = State("Disconnected", initial=True)
    connecting = State("Connecting")
    connected_unauthenticated = State("Connected")
    connected_authenticated = State("Authenticated")

    dial = disconnected.to(connecting)
    transport_opened = disconnected.to(connected_unauthenticated) | connecting.to(
        connected_unauthenticated,
    )
    authenticated = connected_unauthenticated.to(connected_authenticated)
    transport_closed = (
        connecting.to(disconnected)
        | connected_unauthenticated.to(disconnected)
        | connected_authenticated.to(disconnected)
    )

    def on_enter_state(self, event: Any = None, state: State | None = None) -> None:
        logger.debug("Realtime connection %s -> %s", event, state.id if state else None)


class ConnectivityStateMachine:
    def __init__(self, user_id: int | None = None) -> None:
        self.user_id = user_id
        self.rooms: set[str] = set()
        self.handshakes = 0
        self._lifecycle = ConnectionLifecycle()
        self._handshake_pending = False
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def state(self) -> ConnectionState:
        return ConnectionState(self._lifecycle.current_state.id)

    @property
    def is_connected(self) -> bool:
        return self.state in CONNECTED_STATES

    def add_listener(self, listener: Callable[[bool], None]) -> None:
        """Call ``listener(is_connected)`` whenever the flag flips."""

        self._listeners.append(listener)

    def connecting(self) -> None:
        if self.state is ConnectionState.DISCONNECTED:
            self._fire("dial")

    def opened(self) -> list[ClientMessage]:
        """Transport is up; return the handshake to send.

        A duplicate open without an intervening close returns nothing, so the
        handshake goes out once per (re)connect.
        """

        if self.is_connected:
            logger.debug("Transport open reported twice; handshake already sent")
            return []
        self._fire("transport_opened")
        self._handshake_pending = True
        handshake: list[ClientMessage] = []
        if self.user_id is not None:
            handshake.append(Authenticate(self.user_id))
        handshake.extend(JoinRoom(room) for room in sorted(self.rooms))
        return handshake

    def handshake_sent(self) -> None:
        if not self._handshake_pending or not self.is_connected:
            return
        self._handshake_pending = False
        self.handshakes += 1
        if self.user_id is not None:
            self._fire("authenticated")

    def closed(self) -> None:
        self._handshake_pending = False
        if self.state is not ConnectionState.DISCONNECTED:
            self._fire("transport_closed")

    def join(self, conversation_id: str) -> JoinRoom | None:
        """Remember the room; return the message to send if connected now."""

        self.rooms.add(conversation_id)
        return JoinRoom(conversation_id) if self.is_connected else None

    def leave(self, conversation_id: str) -> LeaveRoom | None:
        self.rooms.discard(conversation_id)
        return LeaveRoom(conversation_id) if self.is_connected else None

    def _fire(self, event: str) -> None:
        was_connected = self.is_connected
        self._lifecycle.send(event)
        if self.is_connected != was_connected:
            for listener in list(self._listeners):
                listener(self.is_connected)


class ConnectionStatusIndicator:
    """Renders the connectivity flag and nothing else."""

    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"

    def __init__(self, machine: ConnectivityStateMachine) -> None:
        self.is_connected = machine.is_connected
        machine.add_listener(self._update)

    def _update(self, is_connected: bool) -> None:  # noqa: FBT001
        self.is_connected = is_connected

    @property
    def label(self) -> str:
        return self.CONNECTED if self.is_connected else self.DISCONNECTED


class RealtimeClient:
    def __init__(
        self,
        url: str,
        *,
        user_id: int | None = None,
        token: str | None = None,
        socketio_path: str = "ws/notifications",
        client: socketio.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.token = token
        self.socketio_path = socketio_path
        self.sio = client if client is not None else socketio.AsyncClient(logger=False)
        self.machine = ConnectivityStateMachine(user_id)
        self.online_users: set[int] = set()
        self._handlers: dict[str, list[Callable[[dict[str, Any]], Any]]] = {}

        self.sio.on("connect", self._on_connect)
        self.sio.on("disconnect", self._on_disconnect)
        self.sio.on("connect_error", self._on_connect_error)
        for event in SERVER_EVENTS:
            self.sio.on(event, self._dispatcher(event))

    @property
    def is_connected(self) -> bool:
        return self.machine.is_connected

    def on(self, event: str, handler: Callable[[dict[str, Any]], Any]) -> None:
        """Register a callback for a server event (``notification``, ...)."""

        self._handlers.setdefault(event, []).append(handler)

    async def connect(self) -> None:
        self.machine.connecting()
        auth = {"token": self.token} if self.token else None
        await self.sio.connect(self.url, auth=auth, socketio_path=self.socketio_path)

    async def disconnect(self) -> None:
        await self.sio.disconnect()

    async def wait(self) -> None:
        await self.sio.wait()

    async def join_conversation(self, conversation_id: str) -> None:
        message = self.machine.join(str(conversation_id))
        if message is not None:
            await self._send(message)

    async def leave_conversation(self, conversation_id: str) -> None:
        message = self.machine.leave(str(conversation_id))
        if message is not None:
            await self._send(message)

    # Transport events --------------------------------------------------------

    async def _on_connect(self) -> None:
        for message in self.machine.opened():
            await self._send(message)
        self.machine.handshake_sent()
        logger.info("Realtime connected (%s)", self.machine.state.value)

    async def _on_disconnect(self, *args: Any) -> None:
        self.machine.closed()
        self.online_users.clear()
        logger.info("Realtime disconnected %s", args[0] if args else "")

    async def _on_connect_error(self, data: Any = None) -> None:
        self.machine.closed()
        logger.warning("Realtime connection error: %s", data)

    # Server events -----------------------------------------------------------

    def _dispatcher(self, event: str):
        async def dispatch(data: Any = None) -> None:
            payload = data if isinstance(data, dict) else {}
            self._track_presence(event, payload)
            for handler in self._handlers.get(event, ()):
                result = handler(payload)
                if hasattr(result, "__await__"):
                    await result

        return dispatch

    def _track_presence(self, event: str, payload: dict[str, Any]) -> None:
        user_id = payload.get("userId")
        if not isinstance(user_id, int):
            return
        if event == UserOnline.event:
            self.online_users.add(user_id)
        elif event == UserOffline.event:
            self.online_users.discard(user_id)

    async def _send(self, message: ClientMessage) -> None:
        await self.sio.emit(message.event, message.to_wire())
