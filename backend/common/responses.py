"""
The uniform response envelope.

    { success, data?, message?, code?, errors?, timestamp }
"""

from typing import Any, List, Optional

from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response


def iso_timestamp() -> str:
    """Current UTC time as an ISO 8601 string with a Z suffix."""
    return timezone.now().isoformat().replace('+00:00', 'Z')


def success_body(data: Any = None, message: Optional[str] = None) -> dict:
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body['timestamp'] = iso_timestamp()
    return body


def error_body(
    message: str,
    code: str,
    errors: Optional[List[str]] = None,
    stack: Optional[str] = None,
) -> dict:
    body = {
        'success': False,
        'message': message,
        'code': code,
        'errors': errors or [],
        'timestamp': iso_timestamp(),
    }
    if stack:
        body['stack'] = stack
    return body


def envelope(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """Wrap a successful payload in the envelope."""
    return Response(success_body(data, message), status=status_code)


def created(data: Any, message: str) -> Response:
    return envelope(data, message, status.HTTP_201_CREATED)
