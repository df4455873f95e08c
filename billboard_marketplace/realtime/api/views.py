from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import inline_serializer
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from billboard_marketplace.realtime.socketio import is_user_online


class PresenceView(APIView):
    """Whether a user currently holds at least one live Socket.IO connection."""

    @extend_schema(
        tags=["Realtime"],
        responses=inline_serializer(
            "Presence",
            fields={
                "userId": serializers.IntegerField(),
                "online": serializers.BooleanField(),
            },
        ),
    )
    def get(self, request, user_id: int):
        return Response({"userId": user_id, "online": is_user_online(user_id)})
