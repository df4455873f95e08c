from django.db.models import Q
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from drf_spectacular.utils import inline_serializer
from rest_framework import mixins
from rest_framework import serializers
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from billboard_marketplace.audit.models import AuditLog
from billboard_marketplace.audit.utils import log_action
from billboard_marketplace.billboards.models import Billboard
from billboard_marketplace.users.api.permissions import IsAdminRole
from billboard_marketplace.users.api.permissions import IsOwnerOrAdmin
from billboard_marketplace.users.api.permissions import IsOwnerRole

from .filters import BillboardFilter
from .serializers import BillboardSerializer
from .serializers import BillboardStatusSerializer
from .serializers import BillboardWriteSerializer
from .serializers import RejectBillboardSerializer


@extend_schema_view(
    list=extend_schema(tags=["Billboards"]),
    retrieve=extend_schema(tags=["Billboards"]),
    create=extend_schema(
        tags=["Billboards"],
        request=BillboardWriteSerializer,
        responses={201: BillboardSerializer},
    ),
    partial_update=extend_schema(
        tags=["Billboards"],
        request=BillboardWriteSerializer,
        responses=BillboardSerializer,
    ),
)
class BillboardViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    GenericViewSet,
):
    """Listings.

    - list/retrieve: active listings plus the caller's own; admins see all
    - create: owners only, new listings wait in PENDING for moderation
    - partial_update: the listing's owner or an admin
    - status: the owner toggles ACTIVE/INACTIVE/PENDING
    """

    serializer_class = BillboardSerializer
    queryset = Billboard.objects.select_related("owner")
    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_class = BillboardFilter
    search_fields = ["title", "description", "address", "city"]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_permissions(self):
        if self.action in ("create", "change_status"):
            return [IsOwnerRole()]
        if self.action == "partial_update":
            return [IsOwnerOrAdmin()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action in ("create", "partial_update"):
            return BillboardWriteSerializer
        if self.action == "change_status":
            return BillboardStatusSerializer
        return BillboardSerializer

    def get_queryset(self):  # type: ignore[override]
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_admin", False):
            return qs
        return qs.filter(Q(status=Billboard.Status.ACTIVE) | Q(owner=user))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        billboard = serializer.save(owner=request.user, status=Billboard.Status.PENDING)
        return Response(
            BillboardSerializer(billboard).data,
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, *args, **kwargs):
        billboard = self.get_object()
        serializer = self.get_serializer(billboard, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(BillboardSerializer(billboard).data)

    @extend_schema(
        tags=["Billboards"],
        request=BillboardStatusSerializer,
        responses=inline_serializer(
            "BillboardStatusChanged",
            fields={
                "message": serializers.CharField(),
                "billboard": BillboardSerializer(),
            },
        ),
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request, pk=None):
        billboard = self.get_object()
        serializer = self.get_serializer(billboard, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(
            {
                "message": "Billboard status updated successfully",
                "billboard": BillboardSerializer(billboard).data,
            },
        )


def _snapshot(billboard: Billboard) -> dict:
    return {"status": billboard.status}


class ApproveBillboardView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(tags=["Moderation"], request=None, responses=BillboardSerializer)
    def post(self, request, pk: int):
        billboard = get_object_or_404(Billboard, pk=pk)
        before = _snapshot(billboard)
        billboard.approve(request.user)
        log_action(
            AuditLog.Action.BILLBOARD_APPROVED,
            target=billboard,
            request=request,
            before=before,
            after=_snapshot(billboard),
        )
        return Response(BillboardSerializer(billboard).data)


class RejectBillboardView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        tags=["Moderation"],
        request=RejectBillboardSerializer,
        responses=BillboardSerializer,
    )
    def post(self, request, pk: int):
        billboard = get_object_or_404(Billboard, pk=pk)
        payload = RejectBillboardSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        reason = payload.validated_data["reason"]

        before = _snapshot(billboard)
        billboard.reject(request.user, reason)
        log_action(
            AuditLog.Action.BILLBOARD_REJECTED,
            target=billboard,
            request=request,
            reason=reason,
            before=before,
            after=_snapshot(billboard),
        )
        return Response(BillboardSerializer(billboard).data)
