"""
Goal Service for FocusFlow.

Goal defaults, the auto-complete rule, ownership of parent goals and the
goal statistics.
"""

import logging
import uuid
from typing import Dict, List, Optional

from django.db.models import Avg, Prefetch, QuerySet

from common.errors import ValidationError
from common.metrics import completion_rate, round_half_up
from common.ownership import get_owned_or_404, resolve_owned_reference, would_create_cycle
from goals.models import Goal

logger = logging.getLogger(__name__)

NULL_SENTINEL = 'null'

UPDATABLE_FIELDS = {
    'title': 'title',
    'description': 'description',
    'category': 'category',
    'targetDate': 'target_date',
    'progressPercentage': 'progress_percentage',
    'isCompleted': 'is_completed',
}


def apply_auto_complete(goal: Goal, data: Dict):
    """
    Force is_completed when progress is 100, unless the same update
    explicitly sent isCompleted=false.
    """
    if goal.progress_percentage == 100 and data.get('isCompleted') is not False:
        goal.is_completed = True


class GoalService:
    """
    Goal operations scoped to one owner.

    Args:
        owner: The authenticated user every query is restricted to
    """

    def __init__(self, owner):
        self.owner = owner

    def queryset(self) -> QuerySet:
        """The owner's goals with two levels of subgoals loaded."""
        return Goal.objects.filter(user=self.owner).prefetch_related(
            Prefetch('subgoals', queryset=Goal.objects.prefetch_related('subgoals'))
        )

    def get(self, goal_id) -> Goal:
        return get_owned_or_404(self.queryset(), goal_id, self.owner, 'Goal')

    def list(self, params) -> List[Goal]:
        """
        The owner's goals, newest first.

        Filters: category, isCompleted ('true'/'false'), parentGoalId ('null'
        for top-level goals).
        """
        queryset = self.queryset()

        category = params.get('category')
        if category:
            if category not in Goal.Category.values:
                raise ValidationError(
                    'Invalid goal filter',
                    [f"category: '{category}' is not one of {', '.join(Goal.Category.values)}"]
                )
            queryset = queryset.filter(category=category)

        is_completed = params.get('isCompleted')
        if is_completed is not None:
            queryset = queryset.filter(is_completed=is_completed == 'true')

        parent_goal_id = params.get('parentGoalId')
        if parent_goal_id == NULL_SENTINEL:
            queryset = queryset.filter(parent_goal__isnull=True)
        elif parent_goal_id:
            try:
                parent_key = uuid.UUID(parent_goal_id)
            except ValueError:
                raise ValidationError('Invalid parentGoalId', ['parentGoalId: Must be a valid UUID'])
            queryset = queryset.filter(parent_goal_id=parent_key)

        return list(queryset.order_by('-created_at'))

    def _resolve_parent(self, parent_id) -> Optional[Goal]:
        if parent_id is None:
            return None
        return resolve_owned_reference(Goal, parent_id, self.owner, 'Invalid parent goal')

    def create(self, data: Dict) -> Goal:
        goal = Goal(
            user=self.owner,
            title=data['title'],
            description=data.get('description'),
            category=data.get('category') or Goal.Category.OTHER,
            target_date=data.get('targetDate'),
            parent_goal=self._resolve_parent(data.get('parentGoalId')),
        )
        goal.save()

        logger.info(f"Created goal {goal.pk} for user {self.owner.pk}")
        return self.get(goal.pk)

    def update(self, goal_id, data: Dict) -> Goal:
        """Merge the supplied fields, then apply the auto-complete rule."""
        goal = get_owned_or_404(Goal, goal_id, self.owner, 'Goal')

        for wire_name, attr in UPDATABLE_FIELDS.items():
            if wire_name in data:
                setattr(goal, attr, data[wire_name])

        if 'parentGoalId' in data:
            parent = self._resolve_parent(data['parentGoalId'])
            if would_create_cycle(goal, parent, 'parent_goal_id'):
                raise ValidationError('A goal cannot be its own ancestor')
            goal.parent_goal = parent

        apply_auto_complete(goal, data)
        goal.save()
        return self.get(goal.pk)

    def delete(self, goal_id):
        """Delete a goal; its subgoals go with it."""
        goal = get_owned_or_404(Goal, goal_id, self.owner, 'Goal')
        goal.delete()
        logger.info(f"Deleted goal {goal_id} for user {self.owner.pk}")

    def stats(self) -> Dict[str, int]:
        owned = Goal.objects.filter(user=self.owner)
        total = owned.count()
        completed = owned.filter(is_completed=True).count()
        average = owned.filter(is_completed=False).aggregate(
            average=Avg('progress_percentage')
        )['average']

        return {
            'total': total,
            'completed': completed,
            'inProgress': total - completed,
            'averageProgress': round_half_up(float(average or 0)),
            'completionRate': completion_rate(completed, total),
        }
