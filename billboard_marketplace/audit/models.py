from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    """Append-only trail of moderation and account actions."""

    class Action(models.TextChoices):
        BILLBOARD_APPROVED = "billboard_approved", _("Billboard approved")
        BILLBOARD_REJECTED = "billboard_rejected", _("Billboard rejected")
        USER_SUSPENDED = "user_suspended", _("User suspended")
        USER_UPDATED = "user_updated", _("Profile updated")

    action = models.CharField(max_length=64, db_index=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_entries",
    )
    target_type = models.CharField(max_length=100, blank=True)
    target_id = models.BigIntegerField(null=True, blank=True)
    reason = models.TextField(blank=True)
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["target_type", "target_id"], name="audit_target_idx"),
        ]

    def __str__(self) -> str:
        who = self.actor_id or "system"
        return f"{self.action} on {self.target_type}#{self.target_id} by {who}"
