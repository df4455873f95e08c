from __future__ import annotations

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from tests.permissions.factories import create_billboard
from tests.permissions.factories import create_user_with_role

User = get_user_model()

ROLE_ADMIN = User.Role.ADMIN
ROLE_OWNER = User.Role.OWNER
ROLE_ADVERTISER = User.Role.ADVERTISER
ROLES = [ROLE_ADMIN, ROLE_OWNER, ROLE_ADVERTISER]


class RoleAPITestCase(APITestCase):
    """Base test case with one user per role and a pending billboard."""

    def setUp(self):
        super().setUp()
        self.roles: dict[str, User] = {
            ROLE_ADMIN: create_user_with_role("admin", role=ROLE_ADMIN),
            ROLE_OWNER: create_user_with_role("owner", role=ROLE_OWNER),
            ROLE_ADVERTISER: create_user_with_role("advertiser", role=ROLE_ADVERTISER),
        }
        self.billboard = create_billboard(self.roles[ROLE_OWNER])

    # Utilities -------------------------------------------------------------
    def authenticate(self, role: str | None):
        if role is None:
            self.client.force_authenticate(user=None)
        else:
            self.client.force_authenticate(user=self.roles[role])

    def assert_http_status(self, response, expected_status: int):
        msg = getattr(response, "data", response)
        assert response.status_code == expected_status, msg

    def get(self, url_name: str, *, role: str | None, reverse_kwargs=None, **kwargs):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.get(url, **kwargs)

    def post(
        self,
        url_name: str,
        *,
        role: str | None,
        payload=None,
        reverse_kwargs=None,
        **kwargs,
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.post(url, data=payload or {}, format="json", **kwargs)

    def assert_allowed(self, response):
        assert response.status_code in (
            status.HTTP_200_OK,
            status.HTTP_201_CREATED,
        ), response.data

    def assert_unauthorized(self, response):
        assert response.status_code == status.HTTP_401_UNAUTHORIZED, response.data
        assert "error" in response.data
