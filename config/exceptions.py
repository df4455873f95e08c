"""DRF exception handler producing the `{"error": ...}` envelope.

Every API endpoint reports failures with a JSON body of the form
``{"error": "<message>"}``. Authentication and role failures share the 401
status so clients cannot tell "no session" from "wrong role".
"""

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)

UNAUTHORIZED = "Unauthorized"
AUTHENTICATION_REQUIRED = "Authentication required"
NOT_FOUND = "Not found"
INTERNAL_ERROR = "Internal server error"


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    response = _handle(exc, context)
    if response is not None:
        # Handled errors must not leave a half-applied ATOMIC_REQUESTS transaction.
        set_rollback()
    return response


def _handle(exc: Exception, context: dict[str, Any]) -> Response | None:
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return Response(
            {"error": AUTHENTICATION_REQUIRED},
            status=status.HTTP_401_UNAUTHORIZED,
        )
    if isinstance(exc, (exceptions.PermissionDenied, DjangoPermissionDenied)):
        return Response({"error": UNAUTHORIZED}, status=status.HTTP_401_UNAUTHORIZED)
    if isinstance(exc, (Http404, exceptions.NotFound)):
        return Response({"error": NOT_FOUND}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, exceptions.ValidationError):
        return Response(
            {"error": "Invalid request data", "details": exc.detail},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception("Storage failure in %s", type(view).__name__)
        return Response(
            {"error": INTERNAL_ERROR},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        response.data = {"error": str(detail or exc)}
    return response
