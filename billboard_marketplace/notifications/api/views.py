from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from drf_spectacular.utils import inline_serializer
from rest_framework import mixins
from rest_framework import serializers
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from billboard_marketplace.notifications import services
from billboard_marketplace.notifications.models import Notification
from billboard_marketplace.notifications.models import PushSubscription
from billboard_marketplace.notifications.push import VapidKeyNotConfigured
from billboard_marketplace.notifications.push import get_public_vapid_key

from .serializers import NotificationListQuerySerializer
from .serializers import NotificationSerializer
from .serializers import PushSubscriptionSerializer

logger = logging.getLogger(__name__)

SuccessResponse = inline_serializer(
    "PushSuccess",
    fields={"success": serializers.BooleanField()},
)


@extend_schema_view(
    list=extend_schema(
        tags=["Notifications"],
        parameters=[NotificationListQuerySerializer],
    ),
    destroy=extend_schema(tags=["Notifications"]),
)
class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    GenericViewSet,
):
    """Notifications for the authenticated user.

    - list: paginated, newest first, optional ``unreadOnly``
    - unread_count / mark_read / mark_all_read
    - destroy: deletes a notification (recipient only)
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    pagination_class = None

    def get_queryset(self):
        return Notification.objects.filter(recipient=self.request.user)

    def list(self, request, *args, **kwargs):
        query = NotificationListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = services.get_user_notifications(
            request.user,
            page=query.validated_data["page"],
            limit=query.validated_data["limit"],
            unread_only=query.validated_data["unreadOnly"],
        )
        return Response(
            {
                "notifications": NotificationSerializer(
                    page["notifications"],
                    many=True,
                ).data,
                "pagination": page["pagination"],
            },
        )

    def destroy(self, request, *args, **kwargs):
        services.delete_notification(self.get_object())
        return Response({"success": True})

    @extend_schema(tags=["Notifications"])
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        return Response({"count": services.get_unread_count(request.user)})

    @extend_schema(tags=["Notifications"], request=None)
    @action(detail=True, methods=["post"], url_path="mark-read")
    def mark_read(self, request, pk=None):
        notification = services.mark_as_read(self.get_object())
        return Response(
            {
                "success": True,
                "notification": {
                    "id": notification.id,
                    "read": notification.is_read,
                    "readAt": notification.read_at,
                },
            },
        )

    @extend_schema(tags=["Notifications"], request=None)
    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request):
        updated = services.mark_all_as_read(request.user)
        return Response({"success": True, "updated": updated})


class VapidKeyView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(
        tags=["Push"],
        responses=inline_serializer(
            "VapidPublicKey",
            fields={"publicKey": serializers.CharField()},
        ),
    )
    def get(self, request):
        try:
            key = get_public_vapid_key()
        except VapidKeyNotConfigured:
            logger.error("VAPID public key requested but not configured")
            return Response(
                {"error": "VAPID key not configured"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"publicKey": key})


class PushSubscriptionView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Push"],
        request=PushSubscriptionSerializer,
        responses=inline_serializer(
            "PushSubscribed",
            fields={
                "success": serializers.BooleanField(),
                "subscriptionId": serializers.IntegerField(),
            },
        ),
    )
    def post(self, request):
        serializer = PushSubscriptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        subscription = serializer.save(user=request.user)
        return Response({"success": True, "subscriptionId": subscription.pk})

    @extend_schema(
        tags=["Push"],
        parameters=[OpenApiParameter("endpoint", str, required=True)],
        responses=SuccessResponse,
    )
    def delete(self, request):
        endpoint = request.query_params.get("endpoint")
        if not endpoint:
            return Response(
                {"error": "Endpoint is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        PushSubscription.objects.filter(user=request.user, endpoint=endpoint).delete()
        return Response({"success": True})
