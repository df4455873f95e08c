"""Notification persistence and the helpers other apps use to notify users.

Creating a Notification row is the whole contract: the post_save signal takes
care of the live Socket.IO event and the Web Push fan-out once the
transaction commits.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING
from typing import Any

from django.utils import timezone

from .models import Notification

if TYPE_CHECKING:
    from billboard_marketplace.billboards.models import Billboard
    from billboard_marketplace.messaging.models import Conversation
    from billboard_marketplace.messaging.models import Message
    from billboard_marketplace.users.models import User

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
PREVIEW_LENGTH = 100

STATUS_MESSAGES = {
    "ACTIVE": "Your billboard is now active.",
    "INACTIVE": "Your billboard has been deactivated.",
    "PENDING": "Your billboard is awaiting review.",
    "REJECTED": "Your billboard submission has been rejected.",
    "SUSPENDED": "Your billboard has been suspended.",
}
APPROVED_MESSAGE = "Your billboard has been approved and is now live!"


def create_notification(
    recipient: User | int,
    notification_type: str,
    title: str,
    message: str,
    data: dict[str, Any] | None = None,
) -> Notification:
    recipient_id = recipient if isinstance(recipient, int) else recipient.pk
    return Notification.objects.create(
        recipient_id=recipient_id,
        notification_type=notification_type,
        title=title,
        message=message,
        data=data or {},
    )


def get_unread_count(user: User) -> int:
    return Notification.objects.filter(recipient=user, is_read=False).count()


def get_user_notifications(
    user: User,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    unread_only: bool = False,
) -> dict[str, Any]:
    """One page of the user's notifications, newest first."""

    page = max(page, 1)
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    qs = Notification.objects.filter(recipient=user)
    if unread_only:
        qs = qs.filter(is_read=False)
    total = qs.count()
    offset = (page - 1) * limit
    return {
        "notifications": list(qs[offset : offset + limit]),
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }


def mark_as_read(notification: Notification) -> Notification:
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=["is_read", "read_at"])
    return notification


def mark_all_as_read(user: User) -> int:
    return Notification.objects.filter(recipient=user, is_read=False).update(
        is_read=True,
        read_at=timezone.now(),
    )


def delete_notification(notification: Notification) -> None:
    notification.delete()


# Domain helpers ----------------------------------------------------------------


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return f"{text[:PREVIEW_LENGTH]}..."
    return text


def notify_new_message(message: Message) -> Notification:
    sender = message.sender
    sender_name = sender.name or sender.username
    billboard = message.conversation.billboard
    return create_notification(
        message.recipient_id,
        Notification.Type.MESSAGE,
        f"New message from {sender_name}",
        _preview(message.content),
        {
            "conversationId": str(message.conversation_id),
            "billboardTitle": billboard.title if billboard else None,
            "senderName": sender_name,
        },
    )


def notify_inquiry(
    conversation: Conversation,
    advertiser: User,
    billboard: Billboard,
) -> Notification:
    advertiser_name = advertiser.name or advertiser.username
    return create_notification(
        billboard.owner_id,
        Notification.Type.INQUIRY,
        f"New inquiry from {advertiser_name}",
        f'{advertiser_name} is interested in your billboard "{billboard.title}"',
        {
            "billboardId": billboard.pk,
            "billboardTitle": billboard.title,
            "advertiserName": advertiser_name,
            "conversationId": str(conversation.pk),
        },
    )


def notify_status_change(billboard: Billboard, *, old_status: str) -> Notification:
    new_status = billboard.status
    if new_status == "ACTIVE" and old_status == "PENDING":
        text = APPROVED_MESSAGE
    else:
        text = STATUS_MESSAGES.get(new_status, f"Status changed to {new_status}")
    return create_notification(
        billboard.owner_id,
        Notification.Type.STATUS_CHANGE,
        "Billboard Status Update",
        f"{billboard.title}: {text}",
        {
            "billboardId": billboard.pk,
            "billboardTitle": billboard.title,
            "oldStatus": old_status,
            "newStatus": new_status,
        },
    )
