import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .responses import build_envelope

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state of the resource."
    default_code = "conflict"


class PreconditionFailed(APIException):
    status_code = status.HTTP_412_PRECONDITION_FAILED
    default_detail = "A precondition for this request is not satisfied."
    default_code = "precondition_failed"


def first_error_message(detail):
    """Pick a readable message out of a (possibly nested) DRF error detail."""
    if isinstance(detail, dict):
        if not detail:
            return "Validation failed"
        field, value = next(iter(detail.items()))
        message = first_error_message(value)
        if field in ("detail", "non_field_errors"):
            return message
        return f"{field}: {message}"
    if isinstance(detail, (list, tuple)):
        if not detail:
            return "Validation failed"
        return first_error_message(detail[0])
    return str(detail)


def envelope_exception_handler(exc, context):
    """
    Single error boundary: every exception raised by a view ends up here and
    leaves as an envelope with success=False.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}",
            exc_info=exc,
        )
        return Response(
            build_envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", success=False),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    message = first_error_message(response.data)
    # field errors are useful to the client, other details are already in message
    data = response.data if isinstance(exc, ValidationError) else None

    if response.status_code >= 500:
        logger.error(f"Server error {response.status_code}: {message}")

    response.data = build_envelope(response.status_code, message, data, success=False)
    return response
