"""API error taxonomy and the project-wide DRF exception handler.

Every failure leaves the API as ``{"success": false, "error": ...}`` where
``error`` is either a message or a mapping of field names to messages.
Errors raised below the API layer are translated here:

* ``django.core.exceptions.ValidationError`` from model guards -> 400
* ``ObjectDoesNotExist`` / ``Http404`` -> 404
* ``ProtectedError`` (a record still referenced by bookings) -> 409
* anything unrecognised -> 500 ``"Server Error"``, logged with traceback
"""

from __future__ import annotations

import logging

from django.core.exceptions import ObjectDoesNotExist  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db.models import ProtectedError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.exceptions import APIException, NotFound, ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.serializers import as_serializer_error  # type: ignore
from rest_framework.views import exception_handler, set_rollback  # type: ignore

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code = "conflict"


class InvalidCredentials(APIException):
    # DRF answers AuthenticationFailed with 403 on views that have no authenticators
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials."
    default_code = "invalid_credentials"


class PaymentProviderUnavailable(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment provider request failed."
    default_code = "payment_provider_error"


def _error_payload(data):
    if isinstance(data, dict) and set(data) == {"detail"}:
        return data["detail"]
    if isinstance(data, list) and len(data) == 1:
        return data[0]
    return data


def api_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(detail=as_serializer_error(exc))
    elif isinstance(exc, ProtectedError):
        exc = Conflict("Record is referenced by existing bookings.")
    elif isinstance(exc, ObjectDoesNotExist):
        exc = NotFound()

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled API error in %s",
            view.__class__.__name__ if view else "unknown view",
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {"success": False, "error": "Server Error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response.data = {"success": False, "error": _error_payload(response.data)}
    return response
