from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APIClient

from billboard_marketplace.billboards.models import Billboard
from billboard_marketplace.messaging.models import Conversation
from billboard_marketplace.messaging.models import Message
from billboard_marketplace.notifications.models import Notification
from tests.permissions.factories import create_billboard
from tests.permissions.factories import create_user_with_role

pytestmark = pytest.mark.django_db

User = get_user_model()


@pytest.fixture
def owner():
    return create_user_with_role("owner", role=User.Role.OWNER)


@pytest.fixture
def advertiser():
    user = create_user_with_role("advertiser")
    user.name = "Ad Agency"
    user.save()
    return user


@pytest.fixture
def billboard(owner):
    return create_billboard(owner, title="M1 Gantry", status=Billboard.Status.ACTIVE)


def _client(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def test_inquiry_opens_conversation_and_notifies_owner(advertiser, owner, billboard):
    r = _client(advertiser).post(
        "/api/v1/conversations/",
        {"billboard": billboard.pk, "content": "Is May available?"},
        format="json",
    )
    assert r.status_code == status.HTTP_201_CREATED, r.data
    conversation = Conversation.objects.get(pk=r.data["id"])
    assert set(conversation.participants.values_list("id", flat=True)) == {
        owner.pk,
        advertiser.pk,
    }
    assert r.data["message"]["content"] == "Is May available?"
    assert r.data["message"]["recipient"] == owner.pk

    note = Notification.objects.get(recipient=owner)
    assert note.notification_type == Notification.Type.INQUIRY
    assert note.title == "New inquiry from Ad Agency"
    assert note.data["conversationId"] == str(conversation.pk)


def test_second_inquiry_reuses_conversation(advertiser, owner, billboard):
    client = _client(advertiser)
    payload = {"billboard": billboard.pk, "content": "Hello"}
    first = client.post("/api/v1/conversations/", payload, format="json")
    second = client.post("/api/v1/conversations/", payload, format="json")
    assert first.data["id"] == second.data["id"]
    types = list(
        Notification.objects.filter(recipient=owner)
        .order_by("id")
        .values_list("notification_type", flat=True),
    )
    assert types == [Notification.Type.INQUIRY, Notification.Type.MESSAGE]


def test_inquiry_on_inactive_billboard_is_rejected(advertiser, owner):
    pending = create_billboard(owner, title="Pending")
    r = _client(advertiser).post(
        "/api/v1/conversations/",
        {"billboard": pending.pk, "content": "Hi"},
        format="json",
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "billboard" in r.data["details"]
    assert not Conversation.objects.exists()


def test_owner_cannot_inquire_on_own_billboard(owner, billboard):
    r = _client(owner).post(
        "/api/v1/conversations/",
        {"billboard": billboard.pk, "content": "Hi me"},
        format="json",
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_reply_and_read_thread(advertiser, owner, billboard):
    opened = _client(advertiser).post(
        "/api/v1/conversations/",
        {"billboard": billboard.pk, "content": "Hello"},
        format="json",
    )
    url = f"/api/v1/conversations/{opened.data['id']}/messages/"

    owner_client = _client(owner)
    reply = owner_client.post(url, {"content": "Yes, it is."}, format="json")
    assert reply.status_code == status.HTTP_201_CREATED
    assert reply.data["recipient"] == advertiser.pk
    assert reply.data["sender_name"] == "owner"

    thread = owner_client.get(url)
    assert [m["content"] for m in thread.data] == ["Hello", "Yes, it is."]
    # Reading the thread marks messages addressed to the reader as read
    assert Message.objects.get(content="Hello").read_at is not None
    assert Message.objects.get(content="Yes, it is.").read_at is None


def test_outsider_cannot_see_conversation(advertiser, billboard):
    opened = _client(advertiser).post(
        "/api/v1/conversations/",
        {"billboard": billboard.pk, "content": "Hello"},
        format="json",
    )
    outsider = _client(create_user_with_role("outsider"))
    r = outsider.get(f"/api/v1/conversations/{opened.data['id']}/messages/")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert outsider.get("/api/v1/conversations/").data == []


def test_new_message_published_to_room_after_commit(
    advertiser,
    billboard,
    django_capture_on_commit_callbacks,
):
    with mock.patch(
        "billboard_marketplace.messaging.signals.publish_new_message",
    ) as publish, mock.patch(
        "billboard_marketplace.notifications.signals.publish_notification_created",
    ), django_capture_on_commit_callbacks(execute=True):
        r = _client(advertiser).post(
            "/api/v1/conversations/",
            {"billboard": billboard.pk, "content": "Ping"},
            format="json",
        )
    message = Message.objects.get(pk=r.data["message"]["id"])
    publish.assert_called_once_with(message)


def test_live_message_reaches_the_room_clients_join(
    advertiser,
    billboard,
    django_capture_on_commit_callbacks,
):
    with mock.patch(
        "billboard_marketplace.realtime.events.messaging.deliver_to_room",
        return_value=0,
    ) as deliver, mock.patch(
        "billboard_marketplace.notifications.signals.publish_notification_created",
    ), django_capture_on_commit_callbacks(execute=True):
        r = _client(advertiser).post(
            "/api/v1/conversations/",
            {"billboard": billboard.pk, "content": "Ping"},
            format="json",
        )
    room, event = deliver.call_args.args
    assert room == str(r.data["id"])
    assert event.conversation_id == room
