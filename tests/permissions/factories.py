from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model

from billboard_marketplace.billboards.models import Billboard

User = get_user_model()

TEST_PASSWORD = "TestPass123!"  # noqa: S105 - test credentials only


def create_user_with_role(
    username: str,
    *,
    role: str = User.Role.ADVERTISER,
    suspended: bool = False,
    password: str = TEST_PASSWORD,
) -> User:
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password=password,
        role=role,
        suspended=suspended,
    )


def create_billboard(owner: User, **overrides) -> Billboard:
    fields = {
        "title": "N1 Highway Digital Screen",
        "address": "1 Main Road",
        "city": "Cape Town",
        "province": "Western Cape",
        "traffic_level": Billboard.TrafficLevel.HIGH,
        "base_price": Decimal("15000.00"),
    }
    fields.update(overrides)
    return Billboard.objects.create(owner=owner, **fields)
