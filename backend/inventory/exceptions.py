"""Project-wide DRF exception handler.

Every error response carries an ``error`` message and a ``code`` from the
service error taxonomy so clients can branch on it.  Database failures that
escape a view are logged and reported as ``internal``.
"""

import logging

from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

from .services.errors import Internal

logger = logging.getLogger(__name__)

STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: 'invalid_argument',
    status.HTTP_401_UNAUTHORIZED: 'not_authenticated',
    status.HTTP_403_FORBIDDEN: 'permission_denied',
    status.HTTP_404_NOT_FOUND: 'not_found',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'method_not_allowed',
    status.HTTP_409_CONFLICT: 'conflict',
}


def _first_message(detail):
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if key in ('non_field_errors', 'detail'):
                return message
            return f'{key}: {message}'
        return ''
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.exception('Database error in %s', view.__class__.__name__ if view else 'unknown view')
        exc = Internal()

    response = exception_handler(exc, context)
    if response is None:
        return None

    code = STATUS_CODES.get(response.status_code, 'internal')
    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            'error': _first_message(exc.detail),
            'code': code,
            'details': exc.detail,
        }
        return response

    if isinstance(exc, exceptions.APIException):
        message = _first_message(exc.detail)
    else:
        message = _first_message(response.data)
    response.data = {'error': message, 'code': code}
    return response
