"""Celery application; the worker runs web push delivery off the request path.

Start with ``celery -A config.celery_app worker -l info``.
"""

import os

from celery import Celery
from celery.signals import setup_logging

# pytest and local dev set DJANGO_SETTINGS_MODULE themselves
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

app = Celery("billboard_marketplace")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


@setup_logging.connect
def use_django_logging(*args, **kwargs):
    from logging.config import dictConfig  # noqa: PLC0415

    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)
