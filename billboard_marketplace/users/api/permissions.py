"""Role gates for the API.

Failing any of these results in a 401 through the project exception handler,
so an authenticated caller with the wrong role looks the same as an anonymous
one.
"""

from collections.abc import Iterable

from rest_framework.permissions import BasePermission

from billboard_marketplace.users.models import User

ROLE_ADMIN = User.Role.ADMIN
ROLE_OWNER = User.Role.OWNER
ROLE_ADVERTISER = User.Role.ADVERTISER


def _has_role(user, roles: Iterable[str]) -> bool:
    return getattr(user, "role", None) in set(roles)


class _RolePermission(BasePermission):
    """Base helper to gate access by role names."""

    allowed_roles: tuple[str, ...] = ()

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        return _has_role(user, self.allowed_roles)


def _owns(user, obj) -> bool:
    return getattr(obj, "owner_id", None) == getattr(user, "pk", None)


class IsAdminRole(_RolePermission):
    allowed_roles = (ROLE_ADMIN,)


class IsOwnerRole(_RolePermission):
    """Billboard owners acting on their own listings."""

    allowed_roles = (ROLE_OWNER,)

    def has_object_permission(self, request, view, obj) -> bool:
        return _owns(request.user, obj)


class IsOwnerOrAdmin(_RolePermission):
    """The listing's owner, or any admin."""

    allowed_roles = (ROLE_OWNER, ROLE_ADMIN)

    def has_object_permission(self, request, view, obj) -> bool:
        return _has_role(request.user, (ROLE_ADMIN,)) or _owns(request.user, obj)
