"""Typed messages exchanged over the Socket.IO channel.

Each message is a frozen dataclass carrying its wire event name in the
``event`` class attribute. Client-originated events are parsed into one of
the ``ClientMessage`` types by :func:`parse_client_message`; server-originated
events are built by the application and serialized with ``to_wire()``.

Wire payloads use camelCase keys to match the browser client.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import ClassVar


class ProtocolError(ValueError):
    """Raised for unknown client events or malformed payloads."""


def _coerce_user_id(value: Any) -> int:
    if isinstance(value, bool):
        msg = "userId must be an integer"
        raise ProtocolError(msg)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    msg = "userId must be an integer"
    raise ProtocolError(msg)


def _coerce_room_id(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        msg = "conversationId is required"
        raise ProtocolError(msg)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    msg = "conversationId is required"
    raise ProtocolError(msg)


def _require_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        msg = "payload must be an object"
        raise ProtocolError(msg)
    return data


# Client -> server -------------------------------------------------------------


@dataclass(frozen=True)
class Authenticate:
    event: ClassVar[str] = "authenticate"

    user_id: int

    def to_wire(self) -> dict[str, Any]:
        return {"userId": self.user_id}


@dataclass(frozen=True)
class JoinRoom:
    event: ClassVar[str] = "joinRoom"

    conversation_id: str

    def to_wire(self) -> dict[str, Any]:
        return {"conversationId": self.conversation_id}


@dataclass(frozen=True)
class LeaveRoom:
    event: ClassVar[str] = "leaveRoom"

    conversation_id: str

    def to_wire(self) -> dict[str, Any]:
        return {"conversationId": self.conversation_id}


@dataclass(frozen=True)
class Typing:
    event: ClassVar[str] = "typing"

    conversation_id: str
    is_typing: bool

    def to_wire(self) -> dict[str, Any]:
        return {"conversationId": self.conversation_id, "isTyping": self.is_typing}


ClientMessage = Authenticate | JoinRoom | LeaveRoom | Typing


def parse_client_message(event: str, data: Any) -> ClientMessage:
    """Build the typed message for a client event, or raise ProtocolError."""

    payload = _require_mapping(data)
    if event == Authenticate.event:
        return Authenticate(user_id=_coerce_user_id(payload.get("userId")))
    if event == JoinRoom.event:
        return JoinRoom(conversation_id=_coerce_room_id(payload.get("conversationId")))
    if event == LeaveRoom.event:
        return LeaveRoom(
            conversation_id=_coerce_room_id(payload.get("conversationId")),
        )
    if event == Typing.event:
        return Typing(
            conversation_id=_coerce_room_id(payload.get("conversationId")),
            is_typing=bool(payload.get("isTyping", False)),
        )
    msg = f"unknown event: {event}"
    raise ProtocolError(msg)


# Server -> client -------------------------------------------------------------


@dataclass(frozen=True)
class UserOnline:
    event: ClassVar[str] = "userOnline"

    user_id: int

    def to_wire(self) -> dict[str, Any]:
        return {"userId": self.user_id}


@dataclass(frozen=True)
class UserOffline:
    event: ClassVar[str] = "userOffline"

    user_id: int

    def to_wire(self) -> dict[str, Any]:
        return {"userId": self.user_id}


@dataclass(frozen=True)
class NotificationEvent:
    event: ClassVar[str] = "notification"

    id: int
    type: str
    title: str
    message: str
    created_at: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "data": self.data,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class NewMessage:
    event: ClassVar[str] = "newMessage"

    id: int
    conversation_id: str
    content: str
    sender_id: int
    sender_name: str
    created_at: str

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "conversationId": self.conversation_id,
            "content": self.content,
            "senderId": self.sender_id,
            "senderName": self.sender_name,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class BillboardStatusUpdate:
    event: ClassVar[str] = "billboardStatusUpdate"

    billboard_id: int
    status: str
    updated_at: str

    def to_wire(self) -> dict[str, Any]:
        return {
            "billboardId": self.billboard_id,
            "status": self.status,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class TypingIndicator:
    event: ClassVar[str] = "typing"

    user_id: int
    conversation_id: str
    is_typing: bool

    def to_wire(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "conversationId": self.conversation_id,
            "isTyping": self.is_typing,
        }


ServerMessage = (
    UserOnline
    | UserOffline
    | NotificationEvent
    | NewMessage
    | BillboardStatusUpdate
    | TypingIndicator
)

SERVER_EVENTS: dict[str, type] = {
    cls.event: cls
    for cls in (
        UserOnline,
        UserOffline,
        NotificationEvent,
        NewMessage,
        BillboardStatusUpdate,
        TypingIndicator,
    )
}
