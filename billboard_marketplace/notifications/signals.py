from django.db.models.signals import post_save
from django.db.transaction import on_commit
from django.dispatch import receiver

from billboard_marketplace.realtime.events.notifications import publish_notification_created

from .models import Notification
from .push import push_enabled
from .tasks import send_push


@receiver(post_save, sender=Notification)
def deliver_new_notification(sender, instance, created, **kwargs):
    if not created:
        return
    on_commit(lambda: publish_notification_created(instance))
    if push_enabled():
        on_commit(lambda: send_push.delay(instance.pk))
