from unittest import mock

import pytest
from django.contrib.auth import get_user_model

from billboard_marketplace.notifications.models import Notification

pytestmark = pytest.mark.django_db


@pytest.fixture
def user():
    return get_user_model().objects.create_user(username="n1", email="n1@example.com")


def test_live_event_published_after_commit(user, django_capture_on_commit_callbacks):
    with mock.patch(
        "billboard_marketplace.notifications.signals.publish_notification_created",
    ) as publish:
        with django_capture_on_commit_callbacks() as callbacks:
            note = Notification.objects.create(recipient=user, title="t", message="m")
        publish.assert_not_called()
        for callback in callbacks:
            callback()
    publish.assert_called_once_with(note)


def test_push_task_queued_when_configured(
    user,
    settings,
    django_capture_on_commit_callbacks,
):
    settings.VAPID_PUBLIC_KEY = "pub"
    settings.VAPID_PRIVATE_KEY = "priv"
    with mock.patch(
        "billboard_marketplace.notifications.signals.publish_notification_created",
    ), mock.patch(
        "billboard_marketplace.notifications.signals.send_push",
    ) as task, django_capture_on_commit_callbacks(execute=True):
        note = Notification.objects.create(recipient=user, title="t", message="m")
    task.delay.assert_called_once_with(note.pk)
