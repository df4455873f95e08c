from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from billboard_marketplace.billboards.api.views import ApproveBillboardView
from billboard_marketplace.billboards.api.views import BillboardViewSet
from billboard_marketplace.billboards.api.views import RejectBillboardView
from billboard_marketplace.messaging.api.views import ConversationViewSet
from billboard_marketplace.notifications.api.views import NotificationViewSet
from billboard_marketplace.notifications.api.views import PushSubscriptionView
from billboard_marketplace.notifications.api.views import VapidKeyView
from billboard_marketplace.realtime.api.views import PresenceView
from billboard_marketplace.users.api.views import SuspendUserView
from billboard_marketplace.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("billboards", BillboardViewSet)
router.register("conversations", ConversationViewSet, basename="conversation")
router.register("notifications", NotificationViewSet, basename="notifications")


app_name = "api"
urlpatterns = [
    # Moderation (admin role)
    path(
        "admin/billboards/<int:pk>/approve/",
        ApproveBillboardView.as_view(),
        name="admin-billboard-approve",
    ),
    path(
        "admin/billboards/<int:pk>/reject/",
        RejectBillboardView.as_view(),
        name="admin-billboard-reject",
    ),
    path(
        "admin/users/<int:pk>/suspend/",
        SuspendUserView.as_view(),
        name="admin-user-suspend",
    ),
    path(
        "admin/audit/",
        include(("billboard_marketplace.audit.api.urls", "audit"), namespace="audit"),
    ),
    # Web push
    path("push/vapid-key/", VapidKeyView.as_view(), name="push-vapid-key"),
    path("push/subscribe/", PushSubscriptionView.as_view(), name="push-subscribe"),
    # Presence
    path("presence/<int:user_id>/", PresenceView.as_view(), name="presence"),
    *router.urls,
]
