"""Liveness endpoint reporting database and Redis reachability.

Redis backs the Celery broker used for Web Push fan-out, so a Redis outage
degrades the service without taking the API down.
"""

from __future__ import annotations

from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.db import transaction
from django.http import JsonResponse

import billboard_marketplace

REDIS_TIMEOUT_SECONDS = 0.5


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def check_redis() -> dict[str, Any]:
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return {"ok": False, "error": "REDIS_URL not configured"}
    try:
        client = redis.Redis.from_url(
            url,
            socket_timeout=REDIS_TIMEOUT_SECONDS,
            socket_connect_timeout=REDIS_TIMEOUT_SECONDS,
        )
        client.ping()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


COMPONENT_CHECKS = {"db": check_db, "redis": check_redis}


@transaction.non_atomic_requests
def health(request):
    components = {name: check() for name, check in COMPONENT_CHECKS.items()}
    healthy = [c.get("ok", False) for c in components.values()]

    if all(healthy):
        status, http_status = "ok", 200
    elif any(healthy):
        status, http_status = "degraded", 503
    else:
        status, http_status = "down", 503

    return JsonResponse(
        {
            "status": status,
            "version": billboard_marketplace.__version__,
            "components": components,
        },
        status=http_status,
    )
