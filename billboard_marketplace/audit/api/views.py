from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from billboard_marketplace.audit.api.serializers import AuditLogSerializer
from billboard_marketplace.audit.models import AuditLog
from billboard_marketplace.users.api.permissions import IsAdminRole

DEFAULT_LIMIT = 5
MAX_LIMIT = 50


def _parse_limit(raw) -> int:
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    return max(1, min(limit, MAX_LIMIT))


class RecentAuditView(APIView):
    """Latest moderation and account actions, newest first."""

    permission_classes = [IsAdminRole]

    @extend_schema(
        tags=["Moderation"],
        parameters=[
            OpenApiParameter("limit", int, required=False),
            OpenApiParameter("action", str, required=False, enum=AuditLog.Action.values),
        ],
        responses=AuditLogSerializer(many=True),
    )
    def get(self, request):
        limit = _parse_limit(request.query_params.get("limit", DEFAULT_LIMIT))
        entries = AuditLog.objects.select_related("actor")
        action = request.query_params.get("action")
        if action:
            entries = entries.filter(action=action)
        data = AuditLogSerializer(entries[:limit], many=True).data
        return Response({"results": data, "limit": limit})
