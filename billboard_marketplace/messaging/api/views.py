from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from billboard_marketplace.messaging import services
from billboard_marketplace.messaging.models import Conversation

from .serializers import ConversationSerializer
from .serializers import MessageSerializer
from .serializers import SendMessageSerializer
from .serializers import StartConversationSerializer


@extend_schema_view(
    list=extend_schema(tags=["Messaging"]),
    retrieve=extend_schema(tags=["Messaging"]),
    create=extend_schema(
        tags=["Messaging"],
        request=StartConversationSerializer,
        responses=ConversationSerializer,
    ),
)
class ConversationViewSet(RetrieveModelMixin, ListModelMixin, GenericViewSet):
    """Conversations the caller takes part in.

    Other users' conversations are reported as not found.
    """

    serializer_class = ConversationSerializer
    pagination_class = None

    def get_queryset(self):
        return (
            Conversation.objects.filter(participants=self.request.user)
            .select_related("billboard")
            .prefetch_related("participants")
            .distinct()
        )

    def create(self, request, *args, **kwargs):
        payload = StartConversationSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        conversation, message = services.start_inquiry(
            request.user,
            payload.validated_data["billboard"],
            payload.validated_data["content"],
        )
        data = ConversationSerializer(conversation).data
        data["message"] = MessageSerializer(message).data
        return Response(data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Messaging"],
        request=SendMessageSerializer,
        responses=MessageSerializer(many=True),
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        conversation = self.get_object()
        if request.method == "GET":
            services.mark_conversation_read(conversation, request.user)
            rows = conversation.messages.select_related("sender")
            return Response(MessageSerializer(rows, many=True).data)

        payload = SendMessageSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        message = services.send_message(
            conversation,
            request.user,
            payload.validated_data["content"],
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)
