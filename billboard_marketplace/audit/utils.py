from __future__ import annotations

import ipaddress
from typing import TYPE_CHECKING
from typing import Any

from django.contrib.auth import get_user_model

from .models import AuditLog

if TYPE_CHECKING:
    from django.db.models import Model
    from django.http import HttpRequest


def client_ip(request: HttpRequest | None) -> str | None:
    """First valid address from X-Forwarded-For, else REMOTE_ADDR."""

    if request is None:
        return None
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    candidates = [part.strip() for part in forwarded.split(",") if part.strip()]
    candidates.append(request.META.get("REMOTE_ADDR", ""))
    for candidate in candidates:
        try:
            return str(ipaddress.ip_address(candidate))
        except ValueError:
            continue
    return None


def log_action(  # noqa: PLR0913
    action: str,
    *,
    actor: Any = None,
    target: Model | None = None,
    request: HttpRequest | None = None,
    reason: str = "",
    before: dict | None = None,
    after: dict | None = None,
) -> AuditLog:
    """Record ``action`` against ``target``.

    When ``actor`` is omitted it is taken from ``request.user``; anything that
    is not a saved user (anonymous, management commands) is stored as system.
    """

    if actor is None and request is not None:
        actor = getattr(request, "user", None)
    actor_user = actor if isinstance(actor, get_user_model()) and actor.pk else None
    return AuditLog.objects.create(
        action=action,
        actor=actor_user,
        target_type=target._meta.label if target is not None else "",  # noqa: SLF001
        target_id=target.pk if target is not None else None,
        reason=reason,
        before=before,
        after=after,
        ip_address=client_ip(request),
    )
