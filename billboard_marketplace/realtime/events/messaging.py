from __future__ import annotations

from typing import TYPE_CHECKING

from billboard_marketplace.realtime.protocol import NewMessage
from billboard_marketplace.realtime.socketio import deliver_to_room

if TYPE_CHECKING:
    from billboard_marketplace.messaging.models import Message


def publish_new_message(message: Message) -> int:
    """Broadcast a message to every connection that joined its conversation."""

    sender = message.sender
    event = NewMessage(
        id=message.id,
        conversation_id=str(message.conversation_id),
        content=message.content,
        sender_id=sender.id,
        sender_name=sender.name or sender.username,
        created_at=message.created_at.isoformat(),
    )
    return deliver_to_room(message.conversation.room, event)
