from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
import logging

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """DRF's handler for API errors; anything it does not know becomes an opaque 500."""
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    logger.error(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}", exc_info=exc)
    return Response(
        {"error": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
