from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class BillboardsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "billboard_marketplace.billboards"
    verbose_name = _("Billboards")

    def ready(self):
        import billboard_marketplace.billboards.signals  # noqa: F401, PLC0415
