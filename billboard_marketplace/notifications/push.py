"""Web Push delivery through pywebpush.

Subscriptions the push service reports as gone (404/410) are deleted; any
other failure is logged and only affects that one subscription.
"""

from __future__ import annotations

import json
import logging
import time
from http import HTTPStatus
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings
from pywebpush import WebPushException
from pywebpush import webpush

from .models import PushSubscription

if TYPE_CHECKING:
    from .models import Notification

logger = logging.getLogger(__name__)

DEFAULT_ICON = "/icons/icon-192x192.png"
DEFAULT_BADGE = "/icons/badge-72x72.png"
GONE_STATUSES = {HTTPStatus.NOT_FOUND, HTTPStatus.GONE}


class VapidKeyNotConfigured(Exception):  # noqa: N818
    """No VAPID key pair is configured for this deployment."""


def get_public_vapid_key() -> str:
    key = getattr(settings, "VAPID_PUBLIC_KEY", "")
    if not key:
        raise VapidKeyNotConfigured
    return key


def push_enabled() -> bool:
    return bool(
        getattr(settings, "VAPID_PUBLIC_KEY", "")
        and getattr(settings, "VAPID_PRIVATE_KEY", ""),
    )


def build_payload(notification: Notification) -> dict[str, Any]:
    return {
        "title": notification.title,
        "body": notification.message,
        "icon": DEFAULT_ICON,
        "badge": DEFAULT_BADGE,
        "data": {
            **(notification.data or {}),
            "notificationId": notification.pk,
            "type": notification.notification_type.lower(),
        },
        "tag": f"notification-{notification.pk}",
        "requireInteraction": False,
        "timestamp": int(time.time() * 1000),
    }


def send_push_notification(
    subscription: PushSubscription,
    payload: dict[str, Any],
) -> bool:
    """Deliver one payload; returns False when the subscription was dropped."""

    try:
        webpush(
            subscription_info=subscription.as_subscription_info(),
            data=json.dumps(payload),
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            # pywebpush adds aud/exp to the claims dict it is given
            vapid_claims={"sub": settings.VAPID_CLAIM_EMAIL},
            ttl=settings.WEB_PUSH_TTL,
        )
    except WebPushException as exc:
        status_code = getattr(exc.response, "status_code", None)
        if status_code in GONE_STATUSES:
            logger.info(
                "Removing expired push subscription %s (HTTP %s)",
                subscription.pk,
                status_code,
            )
            subscription.delete()
            return False
        logger.warning("Push to subscription %s failed: %s", subscription.pk, exc)
        return False
    return True


def send_to_user(user_id: int, payload: dict[str, Any]) -> int:
    if not push_enabled():
        logger.debug("Web push disabled; VAPID keys not configured")
        return 0
    sent = 0
    for subscription in PushSubscription.objects.filter(user_id=user_id):
        if send_push_notification(subscription, payload):
            sent += 1
    return sent
