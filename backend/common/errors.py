"""
API error taxonomy for FocusFlow.

Every error a client can see is one of the classes below. They extend DRF's
APIException so views and services can simply raise them; the envelope
exception handler turns them into the uniform JSON error body.
"""

from enum import Enum
from typing import List, Optional

from rest_framework import status
from rest_framework.exceptions import APIException


class ErrorCode(Enum):
    """Machine-readable error codes returned in the envelope."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    ENDPOINT_NOT_FOUND = "ENDPOINT_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    DUPLICATE_RECORD = "DUPLICATE_RECORD"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    FOREIGN_KEY_CONSTRAINT = "FOREIGN_KEY_CONSTRAINT"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(APIException):
    """
    Base class for errors raised by FocusFlow code.

    Attributes:
        status_code: HTTP status
        code: ErrorCode value sent to the client
        message: Human-readable summary
        errors: Optional list of detail messages (e.g. per-field problems)
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = ErrorCode.INTERNAL_ERROR
    default_message = 'Internal Server Error'

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(detail=self.message, code=self.code.value)


class ValidationError(ApiError):
    """Malformed, missing or inconsistent input."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.VALIDATION_ERROR
    default_message = 'Invalid request data'


class AuthenticationError(ApiError):
    """Missing, invalid or expired credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = ErrorCode.AUTHENTICATION_ERROR
    default_message = 'Authentication required'


class AuthorizationError(ApiError):
    """
    Authenticated but not allowed.

    Ownership checks never raise this; they report NotFoundError so other
    users' rows stay invisible.
    """
    status_code = status.HTTP_403_FORBIDDEN
    code = ErrorCode.AUTHORIZATION_ERROR
    default_message = 'Insufficient permissions'


class NotFoundError(ApiError):
    """Missing entity, or one owned by somebody else."""
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.NOT_FOUND
    default_message = 'Resource not found'


class ConflictError(ApiError):
    """Duplicate value for a unique field."""
    status_code = status.HTTP_409_CONFLICT
    code = ErrorCode.CONFLICT
    default_message = 'Resource conflict'


def flatten_serializer_errors(errors, prefix: str = '') -> List[str]:
    """
    Turn DRF's nested serializer.errors into flat "field: message" strings.

    Non-field errors are reported without a prefix.
    """
    flat = []
    if isinstance(errors, dict):
        for field_name, value in errors.items():
            if field_name == 'non_field_errors':
                path = prefix
            else:
                path = f"{prefix}.{field_name}" if prefix else str(field_name)
            flat.extend(flatten_serializer_errors(value, path))
    elif isinstance(errors, (list, tuple)):
        for index, value in enumerate(errors):
            if isinstance(value, (dict, list, tuple)):
                flat.extend(flatten_serializer_errors(value, f"{prefix}.{index}" if prefix else str(index)))
            else:
                flat.extend(flatten_serializer_errors(value, prefix))
    else:
        flat.append(f"{prefix}: {errors}" if prefix else str(errors))
    return flat


def validate_or_raise(serializer, message: str) -> dict:
    """Run a serializer and raise ValidationError(message) with its errors."""
    if not serializer.is_valid():
        raise ValidationError(message, flatten_serializer_errors(serializer.errors))
    return serializer.validated_data
