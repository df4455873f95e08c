from django.db.models.signals import post_save
from django.db.transaction import on_commit
from django.dispatch import receiver

from billboard_marketplace.realtime.events.messaging import publish_new_message

from .models import Message


@receiver(post_save, sender=Message)
def send_message_ws(sender, instance, created, **kwargs):
    if created:
        on_commit(lambda: publish_new_message(instance))
