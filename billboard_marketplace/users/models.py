from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Marketplace account. Every account has exactly one role; moderation
    endpoints are restricted to ``Role.ADMIN``.
    """

    class Role(models.TextChoices):
        ADMIN = "ADMIN", _("Admin")
        OWNER = "OWNER", _("Billboard owner")
        ADVERTISER = "ADVERTISER", _("Advertiser")

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    role = CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.ADVERTISER,
        db_index=True,
    )
    suspended = models.BooleanField(default=False)
    suspended_at = models.DateTimeField(null=True, blank=True)
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        # Only a blank display name is filled from its parts
        if not self.name:
            self.name = f"{self.first_name} {self.last_name}".strip()
        super().save(*args, **kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN

    def suspend(self) -> None:
        self.suspended = True
        self.suspended_at = timezone.now()
        self.save(update_fields=["suspended", "suspended_at", "updated_at"])
