"""
Service-level endpoints: health check, API index and the JSON 404.
"""

from django.http import JsonResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from common.errors import ErrorCode
from common.responses import error_body, iso_timestamp

API_VERSION = '1.0.0'


@extend_schema(
    summary="Health check",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Info']
)
@api_view(['GET'])
@permission_classes([AllowAny])
def health(request: Request) -> Response:
    """
    Liveness probe.

    GET /health
    """
    return Response({
        'success': True,
        'message': 'FocusFlow API is running',
        'timestamp': iso_timestamp(),
        'version': API_VERSION,
    })


@extend_schema(
    summary="API information",
    description="List the resource roots of API v1.",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Info']
)
@api_view(['GET'])
@permission_classes([AllowAny])
def api_index(request: Request) -> Response:
    """
    Return API information and available endpoints.

    GET /api/v1
    """
    return Response({
        'success': True,
        'message': 'FocusFlow API v1',
        'endpoints': {
            'auth': '/api/v1/auth',
            'tasks': '/api/v1/tasks',
            'goals': '/api/v1/goals',
            'categories': '/api/v1/categories',
        },
        'documentation': '/api/v1/docs/',
        'timestamp': iso_timestamp(),
    })


def endpoint_not_found(request, exception=None):
    """handler404: unknown routes get the envelope instead of an HTML page."""
    body = error_body(
        f"Endpoint {request.method} {request.path} not found",
        ErrorCode.ENDPOINT_NOT_FOUND.value,
    )
    del body['errors']
    return JsonResponse(body, status=404)
