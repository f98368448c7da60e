"""
Category endpoints.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.decorators import api_view
from rest_framework.request import Request
from rest_framework.response import Response

from categories.serializers import CategoryInputSerializer, CategorySerializer
from categories.services import CategoryService
from common.errors import validate_or_raise
from common.responses import created, envelope


@extend_schema(
    methods=['GET'],
    summary="List categories",
    description="Favourites first, then by name.",
    parameters=[
        OpenApiParameter('includeCounts', OpenApiTypes.BOOL, description="Embed taskCount in each category"),
    ],
    responses={200: CategorySerializer(many=True)},
    tags=['Categories']
)
@extend_schema(
    methods=['POST'],
    summary="Create a category",
    request=CategoryInputSerializer,
    responses={201: CategorySerializer},
    tags=['Categories']
)
@api_view(['GET', 'POST'])
def category_collection(request: Request) -> Response:
    """
    GET  /api/v1/categories?includeCounts=true
    POST /api/v1/categories
    """
    service = CategoryService(request.user)

    if request.method == 'GET':
        include_counts = request.query_params.get('includeCounts') == 'true'
        categories = service.list(include_counts=include_counts)
        return envelope(CategorySerializer(categories, many=True).data)

    data = validate_or_raise(CategoryInputSerializer(data=request.data), 'Invalid category data')
    category = service.create(data)
    return created(CategorySerializer(category).data, 'Category created successfully')


@extend_schema(
    methods=['GET'],
    summary="Get a category",
    responses={200: CategorySerializer},
    tags=['Categories']
)
@extend_schema(
    methods=['PUT'],
    summary="Update a category",
    request=CategoryInputSerializer,
    responses={200: CategorySerializer},
    tags=['Categories']
)
@extend_schema(
    methods=['DELETE'],
    summary="Delete a category",
    description="Tasks in the category are moved to no category.",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Categories']
)
@api_view(['GET', 'PUT', 'DELETE'])
def category_detail(request: Request, category_id) -> Response:
    """
    GET    /api/v1/categories/<id>
    PUT    /api/v1/categories/<id>
    DELETE /api/v1/categories/<id>
    """
    service = CategoryService(request.user)

    if request.method == 'GET':
        return envelope(CategorySerializer(service.get(category_id)).data)

    if request.method == 'PUT':
        serializer = CategoryInputSerializer(data=request.data, partial=True)
        data = validate_or_raise(serializer, 'Invalid category data')
        category = service.update(category_id, data)
        return envelope(CategorySerializer(category).data, 'Category updated successfully')

    _, message = service.delete(category_id)
    return envelope(message=message)
