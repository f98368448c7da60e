"""
Task endpoints.

List/create, detail/update/delete, statistics and the bulk delete of
completed tasks. All routes require an access token; rows belonging to
other users are reported as not found.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework.decorators import api_view
from rest_framework.request import Request
from rest_framework.response import Response

from common.errors import validate_or_raise
from common.responses import created, envelope
from tasks.filters import SORT_FIELDS
from tasks.models import Task
from tasks.serializers import TaskInputSerializer, TaskSerializer, TaskStatsSerializer
from tasks.services import TaskService

LIST_PARAMETERS = [
    OpenApiParameter('page', OpenApiTypes.INT, description="1-based page number (default 1)"),
    OpenApiParameter('limit', OpenApiTypes.INT, description="Page size, 1-100 (default 50)"),
    OpenApiParameter('sortBy', OpenApiTypes.STR, enum=list(SORT_FIELDS), description="Sort field (default createdAt)"),
    OpenApiParameter('sortOrder', OpenApiTypes.STR, enum=['asc', 'desc'], description="Sort direction (default desc)"),
    OpenApiParameter('status', OpenApiTypes.STR, many=True, enum=Task.Status.values, description="Repeat or comma-separate for several"),
    OpenApiParameter('priority', OpenApiTypes.STR, many=True, enum=Task.Priority.values),
    OpenApiParameter('categoryId', OpenApiTypes.UUID),
    OpenApiParameter('search', OpenApiTypes.STR, description="Case-insensitive match on title or description"),
    OpenApiParameter('dueDate', OpenApiTypes.DATE, description="Tasks due on this calendar day"),
    OpenApiParameter('tags', OpenApiTypes.STR, many=True, description="Tasks carrying every listed tag"),
    OpenApiParameter('parentTaskId', OpenApiTypes.STR, description="Parent id, or 'null' for top-level tasks"),
]


@extend_schema(
    methods=['GET'],
    summary="List tasks",
    description="Filter, sort and paginate the current user's tasks.",
    parameters=LIST_PARAMETERS,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@extend_schema(
    methods=['POST'],
    summary="Create a task",
    request=TaskInputSerializer,
    responses={201: TaskSerializer},
    examples=[
        OpenApiExample(
            'Backburner task',
            value={'title': 'Learn Rust', 'status': 'BACKBURNER', 'backburnerDate': '2026-12-01T00:00:00Z'},
            request_only=True
        )
    ],
    tags=['Tasks']
)
@api_view(['GET', 'POST'])
def task_collection(request: Request) -> Response:
    """
    GET  /api/v1/tasks?page=1&limit=50&status=PENDING&tags=a,b
    POST /api/v1/tasks

    Response (GET):
    {
        "data": [...],
        "pagination": {"page", "limit", "total", "totalPages", "hasNext", "hasPrev"}
    }
    """
    service = TaskService(request.user)

    if request.method == 'GET':
        tasks, page = service.list(request.query_params)
        return envelope({
            'data': TaskSerializer(tasks, many=True).data,
            'pagination': page.to_dict(),
        })

    data = validate_or_raise(TaskInputSerializer(data=request.data), 'Invalid task data')
    task = service.create(data)
    return created(TaskSerializer(task).data, 'Task created successfully')


@extend_schema(
    summary="Task statistics",
    responses={200: TaskStatsSerializer},
    tags=['Tasks']
)
@api_view(['GET'])
def task_stats(request: Request) -> Response:
    """
    GET /api/v1/tasks/stats
    """
    return envelope(TaskService(request.user).stats())


@extend_schema(
    summary="Delete all completed tasks",
    request=None,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@api_view(['DELETE'])
def delete_completed_tasks(request: Request) -> Response:
    """
    DELETE /api/v1/tasks/completed/bulk
    """
    count = TaskService(request.user).delete_completed()
    return envelope(message=f"{count} completed tasks deleted")


@extend_schema(
    methods=['GET'],
    summary="Get a task",
    responses={200: TaskSerializer},
    tags=['Tasks']
)
@extend_schema(
    methods=['PUT'],
    summary="Update a task",
    description="Partial update: omitted fields are unchanged, null clears a field.",
    request=TaskInputSerializer,
    responses={200: TaskSerializer},
    tags=['Tasks']
)
@extend_schema(
    methods=['DELETE'],
    summary="Delete a task and its subtasks",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@api_view(['GET', 'PUT', 'DELETE'])
def task_detail(request: Request, task_id) -> Response:
    """
    GET    /api/v1/tasks/<id>
    PUT    /api/v1/tasks/<id>
    DELETE /api/v1/tasks/<id>
    """
    service = TaskService(request.user)

    if request.method == 'GET':
        return envelope(TaskSerializer(service.get(task_id)).data)

    if request.method == 'PUT':
        serializer = TaskInputSerializer(data=request.data, partial=True)
        data = validate_or_raise(serializer, 'Invalid task data')
        task = service.update(task_id, data)
        return envelope(TaskSerializer(task).data, 'Task updated successfully')

    service.delete(task_id)
    return envelope(message='Task deleted successfully')
