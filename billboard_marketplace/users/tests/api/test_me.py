import pytest
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APIClient

from billboard_marketplace.audit.models import AuditLog

pytestmark = pytest.mark.django_db

User = get_user_model()


@pytest.fixture
def user():
    return User.objects.create_user(
        username="owner001",
        email="owner001@example.com",
        password="Pass!12345",  # noqa: S106
        first_name="Thandi",
        last_name="Mokoena",
        role=User.Role.OWNER,
    )


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def test_me_returns_profile(api_client, user):
    r = api_client.get("/api/v1/users/me/")
    assert r.status_code == status.HTTP_200_OK
    assert r.data["id"] == user.pk
    assert r.data["name"] == "Thandi Mokoena"
    assert r.data["role"] == "OWNER"
    assert r.data["suspended"] is False


def test_me_patch_updates_names(api_client, user):
    r = api_client.patch(
        "/api/v1/users/me/",
        {"first_name": "Lerato"},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.data
    user.refresh_from_db()
    assert user.first_name == "Lerato"
    assert user.name == "Lerato Mokoena"
    assert AuditLog.objects.filter(action="user_updated", target_id=user.pk).exists()


def test_me_patch_rejects_role_escalation(api_client, user):
    r = api_client.patch(
        "/api/v1/users/me/",
        {"role": "ADMIN", "email": "new@example.com"},
        format="json",
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert set(r.data["details"]) == {"role", "email"}
    user.refresh_from_db()
    assert user.role == User.Role.OWNER
    assert user.email == "owner001@example.com"


def test_me_requires_authentication():
    r = APIClient().get("/api/v1/users/me/")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.data == {"error": "Authentication required"}


def test_user_list_is_scoped_for_non_admins(api_client, user):
    User.objects.create_user(username="someone", email="someone@example.com")
    r = api_client.get("/api/v1/users/")
    assert r.status_code == status.HTTP_200_OK
    assert [u["id"] for u in r.data] == [user.pk]


def test_user_list_is_complete_for_admins(user):
    admin = User.objects.create_user(
        username="root",
        email="root@example.com",
        role=User.Role.ADMIN,
    )
    client = APIClient()
    client.force_authenticate(user=admin)
    r = client.get("/api/v1/users/")
    assert r.status_code == status.HTTP_200_OK
    assert {u["id"] for u in r.data} == {user.pk, admin.pk}


def test_me_patch_keeps_explicit_display_name(api_client, user):
    r = api_client.patch(
        "/api/v1/users/me/",
        {"name": "T. M. Display"},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.data
    assert r.data["name"] == "T. M. Display"
    user.refresh_from_db()
    assert user.name == "T. M. Display"
    assert user.first_name == "Thandi"


def test_me_patch_name_wins_over_parts(api_client, user):
    r = api_client.patch(
        "/api/v1/users/me/",
        {"first_name": "Lerato", "name": "Outdoor Media Co"},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.data
    user.refresh_from_db()
    assert user.first_name == "Lerato"
    assert user.name == "Outdoor Media Co"
