# config/exceptions.py
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _flatten_message(detail):
    """Pick the first human readable message out of a DRF error payload."""
    if isinstance(detail, dict):
        if 'error' in detail:
            return _flatten_message(detail['error'])
        for value in detail.values():
            return _flatten_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _flatten_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    DRF exception handler that also understands Django's ValidationError
    (raised by model and service code) and always adds an 'error' string.
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown view'

    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            data = dict(exc.message_dict)
        else:
            data = {'non_field_errors': exc.messages}
        data['error'] = ' '.join(exc.messages)
        logger.warning("Rejected request in %s: %s", view_name, data['error'])
        return Response(data, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(response.data, dict):
        if 'error' not in response.data:
            response.data['error'] = _flatten_message(response.data)
    elif isinstance(response.data, list):
        response.data = {'non_field_errors': response.data, 'error': _flatten_message(response.data)}

    if response.status_code >= 500:
        logger.error("Request failed in %s: %s", view_name, exc)
    else:
        logger.info("Request rejected in %s (%s): %s", view_name, response.status_code, response.data.get('error'))
    return response
