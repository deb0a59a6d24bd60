from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
import logging

from core.errors import ErrorKind

logger = logging.getLogger("fest")


def _kind_for(exc):
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return ErrorKind.UNAUTHENTICATED
    if isinstance(exc, (exceptions.PermissionDenied, DjangoPermissionDenied)):
        return ErrorKind.UNAUTHORIZED
    if isinstance(exc, (exceptions.NotFound, Http404)):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, exceptions.Throttled):
        return ErrorKind.RATE_LIMITED
    return ErrorKind.INVALID_INPUT


def _message_for(data):
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    return "Invalid input."


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into the same envelope the services use.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        return Response(
            {
                "ok": False,
                "kind": _kind_for(exc),
                "message": _message_for(response.data),
                "severity": "error",
                "errors": response.data,
            },
            status=response.status_code,
            headers={
                header: response[header]
                for header in ("Retry-After", "WWW-Authenticate")
                if header in response
            },
        )

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "ok": False,
            "kind": "InternalError",
            "message": "Internal server error.",
            "severity": "error",
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
