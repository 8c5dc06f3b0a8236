from http import HTTPStatus

from rest_framework import status
from rest_framework.renderers import JSONRenderer

from .responses import build_envelope, is_envelope


def default_message(status_code):
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


class EnvelopeJSONRenderer(JSONRenderer):
    """
    Wraps any payload that a view did not already put in the envelope,
    so framework-generated responses share the same shape.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = (renderer_context or {}).get("response")
        if (
            response is not None
            and response.status_code != status.HTTP_204_NO_CONTENT
            and not is_envelope(data)
        ):
            data = build_envelope(response.status_code, default_message(response.status_code), data)
        return super().render(data, accepted_media_type, renderer_context)
