"""JWT endpoints, re-exported so they group under one schema tag.

Token issue goes through ``ActiveAccountTokenObtainPairSerializer`` (set as
SIMPLE_JWT["TOKEN_OBTAIN_SERIALIZER"]), which refuses suspended accounts.
"""

from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework_simplejwt import views as jwt_views

_auth_tag = extend_schema_view(post=extend_schema(tags=["Authentication"]))


@_auth_tag
class TokenCreateView(jwt_views.TokenObtainPairView):
    pass


@_auth_tag
class TokenRefreshView(jwt_views.TokenRefreshView):
    pass


@_auth_tag
class TokenVerifyView(jwt_views.TokenVerifyView):
    pass
