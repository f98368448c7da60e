"""
Single funnel for API errors.

Configured as REST_FRAMEWORK['EXCEPTION_HANDLER']. Domain errors, DRF
errors and database errors all leave through here so the client only ever
sees the envelope, never a store-specific error shape.
"""

import logging
import traceback
from typing import List, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import PermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import set_rollback

from common.errors import ApiError, ErrorCode, flatten_serializer_errors
from common.responses import error_body

logger = logging.getLogger(__name__)


def _translate_integrity_error(exc: IntegrityError) -> Tuple[int, str, str]:
    text = str(exc).lower()
    if 'unique' in text or 'duplicate' in text:
        return (
            status.HTTP_409_CONFLICT,
            'A record with this information already exists',
            ErrorCode.DUPLICATE_RECORD.value,
        )
    if 'foreign key' in text:
        return (
            status.HTTP_400_BAD_REQUEST,
            'Invalid foreign key constraint',
            ErrorCode.FOREIGN_KEY_CONSTRAINT.value,
        )
    return (
        status.HTTP_400_BAD_REQUEST,
        'Database operation failed',
        ErrorCode.DATABASE_ERROR.value,
    )


def describe_exception(exc: Exception) -> Tuple[int, str, str, List[str]]:
    """
    Map any exception to (status_code, message, code, errors).

    Order matters: ApiError subclasses are DRF exceptions too, and
    IntegrityError is a DatabaseError.
    """
    if isinstance(exc, ApiError):
        return exc.status_code, exc.message, exc.code.value, exc.errors

    if isinstance(exc, drf_exceptions.ValidationError):
        return (
            status.HTTP_400_BAD_REQUEST,
            'Invalid request data',
            ErrorCode.VALIDATION_ERROR.value,
            flatten_serializer_errors(exc.detail),
        )

    if isinstance(exc, drf_exceptions.NotAuthenticated):
        return (
            status.HTTP_401_UNAUTHORIZED,
            'Access token required',
            ErrorCode.AUTHENTICATION_ERROR.value,
            [],
        )

    if isinstance(exc, drf_exceptions.AuthenticationFailed):
        return (
            status.HTTP_401_UNAUTHORIZED,
            str(exc.detail),
            ErrorCode.AUTHENTICATION_ERROR.value,
            [],
        )

    if isinstance(exc, drf_exceptions.Throttled):
        message = 'Too many requests, please try again later.'
        if exc.wait:
            message = f"Too many requests, please try again in {int(exc.wait)} seconds."
        return status.HTTP_429_TOO_MANY_REQUESTS, message, ErrorCode.RATE_LIMIT_EXCEEDED.value, []

    if isinstance(exc, drf_exceptions.MethodNotAllowed):
        return exc.status_code, str(exc.detail), ErrorCode.METHOD_NOT_ALLOWED.value, []

    if isinstance(exc, (drf_exceptions.NotFound, Http404, ObjectDoesNotExist)):
        return status.HTTP_404_NOT_FOUND, 'Record not found', ErrorCode.RECORD_NOT_FOUND.value, []

    if isinstance(exc, (drf_exceptions.PermissionDenied, PermissionDenied)):
        return (
            status.HTTP_403_FORBIDDEN,
            'Insufficient permissions',
            ErrorCode.AUTHORIZATION_ERROR.value,
            [],
        )

    if isinstance(exc, drf_exceptions.APIException):
        # ParseError, UnsupportedMediaType, NotAcceptable, ...
        code = ErrorCode.VALIDATION_ERROR.value if exc.status_code == 400 else ErrorCode.INTERNAL_ERROR.value
        return exc.status_code, str(exc.detail), code, []

    if isinstance(exc, DjangoValidationError):
        return (
            status.HTTP_400_BAD_REQUEST,
            'Invalid data provided',
            ErrorCode.VALIDATION_ERROR.value,
            list(exc.messages),
        )

    if isinstance(exc, IntegrityError):
        code_status, message, code = _translate_integrity_error(exc)
        return code_status, message, code, []

    if isinstance(exc, DatabaseError):
        return (
            status.HTTP_503_SERVICE_UNAVAILABLE,
            'Database operation failed',
            ErrorCode.DATABASE_ERROR.value,
            [],
        )

    return (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        'Internal Server Error',
        ErrorCode.INTERNAL_ERROR.value,
        [],
    )


def envelope_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    """DRF exception handler producing the error envelope."""
    status_code, message, code, errors = describe_exception(exc)
    production = settings.FOCUSFLOW.is_production

    request = context.get('request')
    where = f"{request.method} {request.get_full_path()}" if request is not None else 'unknown request'

    if status_code >= 500:
        logger.error(f"{where} failed with {status_code} {code}: {exc}", exc_info=exc)
    elif not production:
        logger.warning(f"{where} -> {status_code} {code}: {message}")

    stack = None
    if not production:
        stack = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    set_rollback()
    response = Response(error_body(message, code, errors, stack), status=status_code)

    # Preserve the headers DRF would have sent
    if isinstance(exc, drf_exceptions.APIException):
        auth_header = getattr(exc, 'auth_header', None)
        if auth_header:
            response['WWW-Authenticate'] = auth_header
        wait = getattr(exc, 'wait', None)
        if wait:
            response['Retry-After'] = str(int(wait))

    return response
