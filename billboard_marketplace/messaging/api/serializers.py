from rest_framework import serializers

from billboard_marketplace.billboards.models import Billboard
from billboard_marketplace.messaging.models import Conversation
from billboard_marketplace.messaging.models import Message


class MessageSerializer(serializers.ModelSerializer[Message]):
    sender_name = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation",
            "sender",
            "sender_name",
            "recipient",
            "content",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_sender_name(self, obj: Message) -> str:
        return obj.sender.name or obj.sender.username


class ConversationSerializer(serializers.ModelSerializer[Conversation]):
    billboard_title = serializers.CharField(
        source="billboard.title",
        read_only=True,
        default=None,
    )
    last_message = serializers.SerializerMethodField()

    class Meta:
        model = Conversation
        fields = [
            "id",
            "billboard",
            "billboard_title",
            "participants",
            "last_message",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_last_message(self, obj: Conversation) -> dict | None:
        message = obj.messages.order_by("-created_at", "-id").first()
        return MessageSerializer(message).data if message else None


class StartConversationSerializer(serializers.Serializer):
    billboard = serializers.PrimaryKeyRelatedField(queryset=Billboard.objects.all())
    content = serializers.CharField(max_length=5000)


class SendMessageSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=5000)
