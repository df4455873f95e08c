import logging

from django.db.models.signals import post_save
from django.db.models.signals import pre_save
from django.db.transaction import on_commit
from django.dispatch import receiver

from billboard_marketplace.notifications.services import notify_status_change
from billboard_marketplace.realtime.events.billboards import publish_billboard_status

from .models import Billboard

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Billboard)
def store_old_status(sender, instance, **kwargs):
    if instance.pk:
        instance._old_status = (  # noqa: SLF001
            Billboard.objects.filter(pk=instance.pk)
            .values_list("status", flat=True)
            .first()
        )
    else:
        instance._old_status = None  # noqa: SLF001


@receiver(post_save, sender=Billboard)
def billboard_status_changed(sender, instance, created, **kwargs):
    if created:
        return
    old_status = getattr(instance, "_old_status", None)
    if old_status is None or old_status == instance.status:
        return
    logger.info(
        "Billboard %s status %s -> %s",
        instance.pk,
        old_status,
        instance.status,
    )
    notify_status_change(instance, old_status=old_status)
    on_commit(lambda: publish_billboard_status(instance))
