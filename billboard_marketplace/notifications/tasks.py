import logging

from celery import shared_task

from billboard_marketplace.notifications.models import Notification
from billboard_marketplace.notifications.push import build_payload
from billboard_marketplace.notifications.push import send_to_user

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_push")
def send_push(notification_id: int) -> int:
    """Fan a notification out to every Web Push subscription of its recipient.

    Returns:
        Number of subscriptions the push service accepted.
    """
    notification = Notification.objects.filter(pk=notification_id).first()
    if notification is None:
        logger.info("Notification %s no longer exists; skipping push", notification_id)
        return 0
    return send_to_user(notification.recipient_id, build_payload(notification))
