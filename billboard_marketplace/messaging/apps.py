from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class MessagingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "billboard_marketplace.messaging"
    verbose_name = _("Messaging")

    def ready(self):
        import billboard_marketplace.messaging.signals  # noqa: F401, PLC0415
