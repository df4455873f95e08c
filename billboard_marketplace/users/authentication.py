"""JWT authentication that refuses suspended accounts."""

from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class ActiveAccountJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if getattr(user, "suspended", False):
            raise AuthenticationFailed(
                _("Account suspended"),
                code="user_suspended",
            )
        return user


class ActiveAccountTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Refuse to issue tokens to suspended accounts."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if getattr(self.user, "suspended", False):
            raise AuthenticationFailed(
                _("Account suspended"),
                code="user_suspended",
            )
        return data
