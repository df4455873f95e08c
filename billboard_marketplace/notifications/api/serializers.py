from __future__ import annotations

from rest_framework import serializers

from billboard_marketplace.notifications.models import Notification
from billboard_marketplace.notifications.models import PushSubscription


class NotificationSerializer(serializers.ModelSerializer):
    """Read serializer for notifications."""

    type = serializers.CharField(source="notification_type", read_only=True)
    read = serializers.BooleanField(source="is_read", read_only=True)

    class Meta:
        model = Notification
        fields = (
            "id",
            "type",
            "title",
            "message",
            "data",
            "read",
            "read_at",
            "created_at",
        )
        read_only_fields = fields


class NotificationListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=100,
        default=20,
    )
    unreadOnly = serializers.BooleanField(required=False, default=False)  # noqa: N815


class _SubscriptionKeysSerializer(serializers.Serializer):
    p256dh = serializers.CharField(max_length=255)
    auth = serializers.CharField(max_length=255)


class PushSubscriptionSerializer(serializers.Serializer):
    endpoint = serializers.URLField(max_length=1000)
    keys = _SubscriptionKeysSerializer()

    def save(self, **kwargs) -> PushSubscription:
        user = kwargs["user"]
        data = self.validated_data
        subscription, _ = PushSubscription.objects.update_or_create(
            user=user,
            endpoint=data["endpoint"],
            defaults={
                "p256dh": data["keys"]["p256dh"],
                "auth": data["keys"]["auth"],
            },
        )
        return subscription
