import logging

from django.http import JsonResponse

from .responses import build_envelope

logger = logging.getLogger(__name__)


def page_not_found(request, exception=None):
    """No route matched; answer in the envelope rather than Django's HTML page."""
    return JsonResponse(build_envelope(404, "Not found", success=False), status=404)


def server_error(request):
    logger.error(f"Unhandled error outside the API views: {request.method} {request.path}")
    return JsonResponse(build_envelope(500, "Internal server error", success=False), status=500)
