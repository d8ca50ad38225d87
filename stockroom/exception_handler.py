"""
Custom exception handler for DRF so every error body has the same shape
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


def _first_message(data):
    """Pull a human readable message out of a DRF error payload"""
    if isinstance(data, dict):
        for value in data.values():
            message = _first_message(value)
            if message:
                return message
        return None
    if isinstance(data, (list, tuple)):
        for item in data:
            message = _first_message(item)
            if message:
                return message
        return None
    return str(data) if data is not None else None


def custom_exception_handler(exc, context):
    """
    Render errors as {"error": message, "error_type": class name}.

    Field validation errors keep their per-field map under "errors".
    Unhandled exceptions become a 500 with a generic message.
    """
    response = exception_handler(exc, context)

    request = context.get('request')
    view = context.get('view')
    endpoint = f"{request.method} {request.path}" if request else 'unknown endpoint'
    view_name = view.__class__.__name__ if view else 'Unknown'

    if response is None:
        logger.error(
            f"[EXCEPTION] Unhandled {exc.__class__.__name__} in {view_name} ({endpoint}): {exc}",
            exc_info=exc,
        )
        set_rollback()
        return Response({
            'error': 'An unexpected error occurred',
            'error_type': exc.__class__.__name__,
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    data = response.data
    body = {
        'error': _first_message(data) or 'Request failed',
        'error_type': exc.__class__.__name__,
    }
    if not (isinstance(data, dict) and set(data.keys()) == {'detail'}):
        body['errors'] = data
    response.data = body

    if response.status_code >= 500:
        logger.error(f"[EXCEPTION] {view_name} ({endpoint}) -> {response.status_code}: {body['error']}", exc_info=exc)
    else:
        logger.info(f"[EXCEPTION] {view_name} ({endpoint}) -> {response.status_code}: {body['error']}")

    return response
