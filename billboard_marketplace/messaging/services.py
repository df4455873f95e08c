"""Conversation workflows: opening an inquiry and replying in a thread."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from billboard_marketplace.billboards.models import Billboard
from billboard_marketplace.notifications.services import notify_inquiry
from billboard_marketplace.notifications.services import notify_new_message

from .models import Conversation
from .models import Message

if TYPE_CHECKING:
    from billboard_marketplace.users.models import User


def other_participant(conversation: Conversation, user: User) -> User | None:
    return conversation.participants.exclude(pk=user.pk).first()


@transaction.atomic
def start_inquiry(
    advertiser: User,
    billboard: Billboard,
    content: str,
) -> tuple[Conversation, Message]:
    """Open (or reuse) the conversation about ``billboard`` and post ``content``.

    The owner gets an inquiry notification when the conversation is new and a
    regular message notification otherwise.
    """
    if billboard.status != Billboard.Status.ACTIVE:
        raise ValidationError({"billboard": "Billboard is not available for inquiries"})
    if billboard.owner_id == advertiser.pk:
        raise ValidationError({"billboard": "Cannot send inquiry to your own billboard"})

    conversation = (
        Conversation.objects.filter(billboard=billboard, participants=advertiser)
        .filter(participants=billboard.owner_id)
        .first()
    )
    created = conversation is None
    if created:
        conversation = Conversation.objects.create(billboard=billboard)
        conversation.participants.add(advertiser, billboard.owner_id)

    message = Message.objects.create(
        conversation=conversation,
        sender=advertiser,
        recipient_id=billboard.owner_id,
        content=content,
    )
    conversation.save(update_fields=["updated_at"])

    if created:
        notify_inquiry(conversation, advertiser, billboard)
    else:
        notify_new_message(message)
    return conversation, message


@transaction.atomic
def send_message(conversation: Conversation, sender: User, content: str) -> Message:
    recipient = other_participant(conversation, sender)
    if recipient is None:
        raise ValidationError({"conversation": "Conversation has no other participant"})
    message = Message.objects.create(
        conversation=conversation,
        sender=sender,
        recipient=recipient,
        content=content,
    )
    conversation.save(update_fields=["updated_at"])
    notify_new_message(message)
    return message


def mark_conversation_read(conversation: Conversation, reader: User) -> int:
    return conversation.messages.filter(recipient=reader, read_at__isnull=True).update(
        read_at=timezone.now(),
    )
