"""
Goal endpoints.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.decorators import api_view
from rest_framework.request import Request
from rest_framework.response import Response

from common.errors import validate_or_raise
from common.responses import created, envelope
from goals.models import Goal
from goals.serializers import GoalInputSerializer, GoalSerializer, GoalStatsSerializer
from goals.services import GoalService


@extend_schema(
    methods=['GET'],
    summary="List goals",
    parameters=[
        OpenApiParameter('category', OpenApiTypes.STR, enum=Goal.Category.values),
        OpenApiParameter('isCompleted', OpenApiTypes.BOOL),
        OpenApiParameter('parentGoalId', OpenApiTypes.STR, description="Parent id, or 'null' for top-level goals"),
    ],
    responses={200: GoalSerializer(many=True)},
    tags=['Goals']
)
@extend_schema(
    methods=['POST'],
    summary="Create a goal",
    request=GoalInputSerializer,
    responses={201: GoalSerializer},
    tags=['Goals']
)
@api_view(['GET', 'POST'])
def goal_collection(request: Request) -> Response:
    """
    GET  /api/v1/goals?category=HEALTH&isCompleted=false&parentGoalId=null
    POST /api/v1/goals
    """
    service = GoalService(request.user)

    if request.method == 'GET':
        goals = service.list(request.query_params)
        return envelope(GoalSerializer(goals, many=True).data)

    data = validate_or_raise(GoalInputSerializer(data=request.data), 'Invalid goal data')
    goal = service.create(data)
    return created(GoalSerializer(goal).data, 'Goal created successfully')


@extend_schema(
    summary="Goal statistics",
    responses={200: GoalStatsSerializer},
    tags=['Goals']
)
@api_view(['GET'])
def goal_stats(request: Request) -> Response:
    """
    GET /api/v1/goals/stats
    """
    return envelope(GoalService(request.user).stats())


@extend_schema(
    methods=['GET'],
    summary="Get a goal",
    responses={200: GoalSerializer},
    tags=['Goals']
)
@extend_schema(
    methods=['PUT'],
    summary="Update a goal",
    description="Partial update. Progress of 100 marks the goal completed unless isCompleted=false is sent.",
    request=GoalInputSerializer,
    responses={200: GoalSerializer},
    tags=['Goals']
)
@extend_schema(
    methods=['DELETE'],
    summary="Delete a goal and its subgoals",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Goals']
)
@api_view(['GET', 'PUT', 'DELETE'])
def goal_detail(request: Request, goal_id) -> Response:
    """
    GET    /api/v1/goals/<id>
    PUT    /api/v1/goals/<id>
    DELETE /api/v1/goals/<id>
    """
    service = GoalService(request.user)

    if request.method == 'GET':
        return envelope(GoalSerializer(service.get(goal_id)).data)

    if request.method == 'PUT':
        serializer = GoalInputSerializer(data=request.data, partial=True)
        data = validate_or_raise(serializer, 'Invalid goal data')
        goal = service.update(goal_id, data)
        return envelope(GoalSerializer(goal).data, 'Goal updated successfully')

    service.delete(goal_id)
    return envelope(message='Goal deleted successfully')
