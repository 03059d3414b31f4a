"""
Error taxonomy and the project-wide DRF exception handler.

Services raise the exceptions below; the handler turns every failure,
ours or DRF's, into the ``{"success": false, "message": ...}``
envelope the dashboard and website expect.
"""
from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = 'Not authorized. No token provided.'


class ValidationError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request.'
    default_code = 'invalid'


class Unauthenticated(exceptions.AuthenticationFailed):
    default_detail = 'User not found or inactive.'
    default_code = 'unauthenticated'


class InvalidToken(exceptions.AuthenticationFailed):
    default_detail = 'Token is invalid or expired.'
    default_code = 'token_not_valid'


class BadCredentials(exceptions.APIException):
    """Wrong username or password.

    Not an ``AuthenticationFailed``: the login view runs without
    authenticators, and DRF would downgrade those to 403.
    """
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid username or password.'
    default_code = 'bad_credentials'


class Forbidden(exceptions.PermissionDenied):
    default_code = 'forbidden'


class NotFound(exceptions.NotFound):
    default_code = 'not_found'


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


class InternalError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error.'
    default_code = 'server_error'


def _flatten(detail) -> str:
    """Collapse DRF error details (str, list or dict) into one sentence."""
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            text = _flatten(value)
            parts.append(text if field == 'non_field_errors' else f'{field}: {text}')
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return ' '.join(_flatten(item) for item in detail)
    return str(detail)


def api_exception_handler(exc, context):
    # rest_framework.views loads DEFAULT_AUTHENTICATION_CLASSES, which import this module
    from rest_framework.views import exception_handler as drf_exception_handler

    resp = drf_exception_handler(exc, context)
    if resp is None:
        # Unexpected failure (usually the database); pass the message through.
        view = context.get('view')
        logger.exception('Unhandled error in %s', type(view).__name__ if view else 'view')
        return Response({'success': False, 'message': str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.NotAuthenticated):
        message = NO_TOKEN_MESSAGE
    elif isinstance(exc, exceptions.APIException):
        message = _flatten(exc.detail)
    else:
        message = _flatten(resp.data.get('detail', resp.data) if isinstance(resp.data, dict) else resp.data)
    resp.data = {'success': False, 'message': message}
    return resp
