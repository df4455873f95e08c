from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from billboard_marketplace.audit.models import AuditLog
from billboard_marketplace.audit.utils import log_action
from billboard_marketplace.users.models import User

from .permissions import IsAdminRole
from .serializers import UserSerializer


@extend_schema_view(
    list=extend_schema(tags=["Users"]),
    retrieve=extend_schema(tags=["Users"]),
    me=extend_schema(tags=["Users"]),
)
class UserViewSet(RetrieveModelMixin, ListModelMixin, GenericViewSet):
    serializer_class = UserSerializer
    queryset = User.objects.all()
    pagination_class = None

    def get_queryset(self, *args, **kwargs):  # type: ignore[override]
        user = self.request.user
        if not getattr(user, "is_authenticated", False):  # pragma: no cover - safety
            return User.objects.none()
        # Admins may list all users; others only themselves
        if getattr(user, "is_admin", False):
            return User.objects.order_by("id")
        return User.objects.filter(pk=user.pk)

    @action(detail=False, methods=["get", "patch"])
    def me(self, request):
        if request.method == "GET":
            serializer = UserSerializer(request.user, context={"request": request})
            return Response(status=status.HTTP_200_OK, data=serializer.data)
        serializer = UserSerializer(
            request.user,
            data=request.data,
            partial=True,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)
        instance = serializer.save()
        log_action(
            AuditLog.Action.USER_UPDATED,
            target=instance,
            request=request,
            after={"name": instance.name},
        )
        return Response(status=status.HTTP_200_OK, data=serializer.data)


class SuspendUserView(APIView):
    """Admin-only: suspend an account. Suspended accounts can no longer sign in."""

    permission_classes = [IsAdminRole]

    @extend_schema(tags=["Moderation"], request=None, responses=UserSerializer)
    def post(self, request, pk: int):
        target = get_object_or_404(User, pk=pk)
        before = {"suspended": target.suspended}
        target.suspend()
        log_action(
            AuditLog.Action.USER_SUSPENDED,
            target=target,
            request=request,
            before=before,
            after={"suspended": True},
        )
        return Response(UserSerializer(target, context={"request": request}).data)
