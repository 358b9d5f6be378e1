import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from algorithms.exceptions import InvalidInput

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    DRF exception handler: malformed matching input becomes a 400 response,
    everything else goes through DRF's default handling.
    """
    if isinstance(exc, InvalidInput):
        view = context.get('view')
        logger.info(f"Rejected invalid input in {view.__class__.__name__ if view else 'api'}: {exc}")
        return Response({
            'success': False,
            'message': str(exc),
        }, status=status.HTTP_400_BAD_REQUEST)

    return exception_handler(exc, context)
