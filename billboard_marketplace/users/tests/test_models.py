import pytest
from django.contrib.auth import get_user_model

pytestmark = pytest.mark.django_db

User = get_user_model()


def test_default_role_is_advertiser():
    user = User.objects.create_user(username="ad", email="ad@example.com")
    assert user.role == User.Role.ADVERTISER
    assert user.is_admin is False


def test_name_built_from_parts_when_present():
    user = User.objects.create_user(
        username="jo",
        email="jo@example.com",
        first_name="Jo",
        last_name="Nkosi",
    )
    assert user.name == "Jo Nkosi"


def test_explicit_name_kept_without_parts():
    user = User.objects.create_user(
        username="co",
        email="co@example.com",
        name="Outdoor Media Co",
    )
    assert user.name == "Outdoor Media Co"


def test_suspend_sets_timestamp():
    user = User.objects.create_user(username="sx", email="sx@example.com")
    user.suspend()
    user.refresh_from_db()
    assert user.suspended is True
    assert user.suspended_at is not None


def test_saving_parts_does_not_overwrite_display_name():
    user = User.objects.create_user(
        username="dn",
        email="dn@example.com",
        first_name="Sipho",
        last_name="Dube",
    )
    user.name = "Dube Screens"
    user.first_name = "Sipho J."
    user.save()
    user.refresh_from_db()
    assert user.name == "Dube Screens"
