from rest_framework import status
from rest_framework.response import Response

ENVELOPE_KEYS = frozenset({"statusCode", "success", "message", "data"})


def build_envelope(status_code, message="", data=None, success=None):
    """Uniform payload shape shared by every endpoint."""
    if success is None:
        success = status_code < 400
    return {
        "statusCode": status_code,
        "success": success,
        "message": message,
        "data": data,
    }


def is_envelope(data):
    return isinstance(data, dict) and set(data.keys()) == ENVELOPE_KEYS


def send_response(data=None, message="", status_code=status.HTTP_200_OK, **kwargs):
    return Response(build_envelope(status_code, message, data), status=status_code, **kwargs)
