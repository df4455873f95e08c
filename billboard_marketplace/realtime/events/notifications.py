from __future__ import annotations

from typing import TYPE_CHECKING

from billboard_marketplace.realtime.protocol import NotificationEvent
from billboard_marketplace.realtime.socketio import deliver_to_user

if TYPE_CHECKING:
    from billboard_marketplace.notifications.models import Notification


def build_notification_event(notification: Notification) -> NotificationEvent:
    return NotificationEvent(
        id=notification.id,
        type=notification.notification_type.lower(),
        title=notification.title,
        message=notification.message,
        data=notification.data or {},
        created_at=notification.created_at.isoformat(),
    )


def publish_notification_created(notification: Notification) -> int:
    """Push a newly created Notification to the recipient's live connections.

    Returns the number of connections reached; 0 when the recipient is
    offline, in which case the persisted row is all they get.
    """

    event = build_notification_event(notification)
    return deliver_to_user(notification.recipient_id, event)
