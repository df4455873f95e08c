"""ASGI entry point: the Socket.IO server in front of Django.

Requests under ``REALTIME_SOCKETIO_PATH`` (Engine.IO long-polling and
WebSocket upgrades alike) go to python-socketio; everything else falls
through to the Django application.

    uvicorn config.asgi:application
"""

import os
import sys
from pathlib import Path

from django.core.asgi import get_asgi_application

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "billboard_marketplace"))

if "DJANGO_SETTINGS_MODULE" not in os.environ:
    local = os.environ.get("BUILD_ENV", "production").lower() == "local"
    os.environ["DJANGO_SETTINGS_MODULE"] = (
        "config.settings.local" if local else "config.settings.production"
    )

# Django must be set up before the gateway module reads settings
django_application = get_asgi_application()

from django.conf import settings  # noqa: E402
from socketio import ASGIApp  # noqa: E402

from billboard_marketplace.realtime.socketio import sio  # noqa: E402

application = ASGIApp(
    sio,
    other_asgi_app=django_application,
    socketio_path=settings.REALTIME_SOCKETIO_PATH,
)
