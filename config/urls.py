from django.conf import settings
from django.contrib import admin
from django.contrib.staticfiles.urls import staticfiles_urlpatterns
from django.urls import include
from django.urls import path
from django.views import defaults as default_views
from drf_spectacular.views import SpectacularAPIView
from drf_spectacular.views import SpectacularSwaggerView

from billboard_marketplace.users.api import auth_views

from .health import health as health_view

jwt_patterns = [
    path("create/", auth_views.TokenCreateView.as_view(), name="jwt-create"),
    path("refresh/", auth_views.TokenRefreshView.as_view(), name="jwt-refresh"),
    path("verify/", auth_views.TokenVerifyView.as_view(), name="jwt-verify"),
]

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path("health/", health_view, name="health"),
    # REST API, reverse with "api_v1:<name>"
    path("api/v1/", include(("config.api_router", "api"), namespace="api_v1")),
    path("api/v1/auth/jwt/", include(jwt_patterns)),
    path("api/v1/schema/", SpectacularAPIView.as_view(), name="api-schema-v1"),
    path(
        "api/v1/docs/",
        SpectacularSwaggerView.as_view(url_name="api-schema-v1"),
        name="api-docs-v1",
    ),
]

if settings.DEBUG:
    # Uvicorn does not serve static files on its own
    urlpatterns += staticfiles_urlpatterns()
    urlpatterns += [
        path(
            "400/",
            default_views.bad_request,
            kwargs={"exception": Exception("Bad Request!")},
        ),
        path(
            "404/",
            default_views.page_not_found,
            kwargs={"exception": Exception("Page not Found")},
        ),
        path("500/", default_views.server_error),
    ]
