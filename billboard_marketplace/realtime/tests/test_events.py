from datetime import UTC
from datetime import datetime
from types import SimpleNamespace
from unittest import mock

from billboard_marketplace.realtime.events.billboards import publish_billboard_status
from billboard_marketplace.realtime.events.messaging import publish_new_message
from billboard_marketplace.realtime.events.notifications import build_notification_event
from billboard_marketplace.realtime.events.notifications import (
    publish_notification_created,
)
from billboard_marketplace.realtime.protocol import BillboardStatusUpdate
from billboard_marketplace.realtime.protocol import NewMessage

CREATED = datetime(2024, 5, 1, 8, 30, tzinfo=UTC)


def _notification(**overrides):
    fields = {
        "id": 11,
        "recipient_id": 3,
        "notification_type": "STATUS_CHANGE",
        "title": "Billboard Status Update",
        "message": "Approved",
        "data": None,
        "created_at": CREATED,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_notification_event_payload():
    event = build_notification_event(_notification())
    assert event.to_wire() == {
        "id": 11,
        "type": "status_change",
        "title": "Billboard Status Update",
        "message": "Approved",
        "data": {},
        "createdAt": "2024-05-01T08:30:00+00:00",
    }


def test_notification_goes_to_recipient():
    with mock.patch(
        "billboard_marketplace.realtime.events.notifications.deliver_to_user",
        return_value=0,
    ) as deliver:
        assert publish_notification_created(_notification()) == 0
    user_id, event = deliver.call_args.args
    assert user_id == 3
    assert event.id == 11


def test_billboard_status_goes_to_owner():
    billboard = SimpleNamespace(id=5, owner_id=8, status="ACTIVE", updated_at=CREATED)
    with mock.patch(
        "billboard_marketplace.realtime.events.billboards.deliver_to_user",
        return_value=1,
    ) as deliver:
        publish_billboard_status(billboard)
    deliver.assert_called_once_with(
        8,
        BillboardStatusUpdate(5, "ACTIVE", "2024-05-01T08:30:00+00:00"),
    )


def test_new_message_goes_to_conversation_room():
    message = SimpleNamespace(
        id=2,
        conversation_id=77,
        conversation=SimpleNamespace(room="77"),
        content="Hello",
        sender=SimpleNamespace(id=4, name="", username="ann"),
        created_at=CREATED,
    )
    with mock.patch(
        "billboard_marketplace.realtime.events.messaging.deliver_to_room",
        return_value=2,
    ) as deliver:
        assert publish_new_message(message) == 2
    deliver.assert_called_once_with(
        "77",
        NewMessage(
            id=2,
            conversation_id="77",
            content="Hello",
            sender_id=4,
            sender_name="ann",
            created_at="2024-05-01T08:30:00+00:00",
        ),
    )
