"""WSGI entry point.

HTTP only: the Socket.IO channel needs the ASGI application in config/asgi.py.
"""

import os
import sys
from pathlib import Path

from django.core.wsgi import get_wsgi_application

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "billboard_marketplace"))

if "DJANGO_SETTINGS_MODULE" not in os.environ:
    local = os.environ.get("BUILD_ENV", "production").lower() == "local"
    os.environ["DJANGO_SETTINGS_MODULE"] = (
        "config.settings.local" if local else "config.settings.production"
    )

application = get_wsgi_application()
