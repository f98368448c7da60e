"""
Task Service for FocusFlow.

Lifecycle rules for tasks: defaults, the backburner date requirement, the
completedAt stamp, ownership of referenced rows and the subtask tree.
"""

import logging
from typing import Dict, List, Optional, Tuple

from django.db import transaction
from django.db.models import Count, Prefetch, QuerySet
from django.utils import timezone

from categories.models import Category
from common.errors import ValidationError
from common.metrics import completion_rate
from common.ownership import get_owned_or_404, resolve_owned_reference, would_create_cycle
from common.pagination import Page, paginate, parse_page_params
from tasks.filters import filter_tasks, ordering_from_params
from tasks.models import Task

logger = logging.getLogger(__name__)

BACKBURNER_MESSAGE = 'Backburner tasks must have either a due date or backburner date assigned'

# Plain fields copied straight from validated input: wire name -> model field
UPDATABLE_FIELDS = {
    'title': 'title',
    'description': 'description',
    'status': 'status',
    'priority': 'priority',
    'dueDate': 'due_date',
    'backburnerDate': 'backburner_date',
    'estimatedHours': 'estimated_hours',
    'actualHours': 'actual_hours',
    'position': 'position',
    'tags': 'tags',
}


def backburner_dates_missing(status: str, due_date, backburner_date) -> bool:
    """True when a BACKBURNER task would have neither date."""
    return status == Task.Status.BACKBURNER and not (due_date or backburner_date)


class TaskService:
    """
    Task operations scoped to one owner.

    Args:
        owner: The authenticated user every query is restricted to
    """

    def __init__(self, owner):
        self.owner = owner

    def queryset(self) -> QuerySet:
        """The owner's tasks with category and one level of subtasks loaded."""
        subtasks = Task.objects.select_related('category')
        return (
            Task.objects.filter(user=self.owner)
            .select_related('category')
            .prefetch_related(Prefetch('subtasks', queryset=subtasks))
        )

    def get(self, task_id) -> Task:
        return get_owned_or_404(self.queryset(), task_id, self.owner, 'Task')

    def list(self, params) -> Tuple[List[Task], Page]:
        """Filter, sort and paginate from request query parameters."""
        queryset = filter_tasks(self.queryset(), params).order_by(*ordering_from_params(params))
        page, limit = parse_page_params(params)
        return paginate(queryset, page, limit)

    def _resolve_category(self, category_id) -> Optional[Category]:
        if category_id is None:
            return None
        return resolve_owned_reference(Category, category_id, self.owner, 'Invalid category')

    def _resolve_parent(self, parent_id) -> Optional[Task]:
        if parent_id is None:
            return None
        return resolve_owned_reference(Task, parent_id, self.owner, 'Invalid parent task')

    @staticmethod
    def _reject_backburner():
        logger.debug("Rejected backburner task without dates")
        raise ValidationError(BACKBURNER_MESSAGE, [f"backburnerDate: {BACKBURNER_MESSAGE}"])

    def create(self, data: Dict) -> Task:
        """
        Create a task from validated input.

        Raises:
            ValidationError: backburner task without dates, or a category or
                parent task the owner does not have
        """
        status = data.get('status') or Task.Status.PENDING
        if backburner_dates_missing(status, data.get('dueDate'), data.get('backburnerDate')):
            self._reject_backburner()

        task = Task(
            user=self.owner,
            title=data['title'],
            description=data.get('description'),
            status=status,
            priority=data.get('priority') or Task.Priority.MEDIUM,
            due_date=data.get('dueDate'),
            backburner_date=data.get('backburnerDate'),
            estimated_hours=data.get('estimatedHours'),
            actual_hours=data.get('actualHours'),
            position=data.get('position', 0),
            tags=list(data.get('tags') or []),
            category=self._resolve_category(data.get('categoryId')),
            parent_task=self._resolve_parent(data.get('parentTaskId')),
            completed_at=timezone.now() if status == Task.Status.COMPLETED else None,
        )
        task.save()

        logger.info(f"Created task {task.pk} for user {self.owner.pk}")
        return self.get(task.pk)

    def update(self, task_id, data: Dict) -> Task:
        """
        Merge the supplied fields into the task.

        Fields absent from data are left alone; fields present as None are
        cleared.
        """
        task = get_owned_or_404(Task, task_id, self.owner, 'Task')
        previous_status = task.status

        for wire_name, attr in UPDATABLE_FIELDS.items():
            if wire_name in data:
                setattr(task, attr, data[wire_name])

        if 'categoryId' in data:
            task.category = self._resolve_category(data['categoryId'])

        if 'parentTaskId' in data:
            parent = self._resolve_parent(data['parentTaskId'])
            if would_create_cycle(task, parent, 'parent_task_id'):
                raise ValidationError('A task cannot be its own ancestor')
            task.parent_task = parent

        if backburner_dates_missing(task.status, task.due_date, task.backburner_date):
            self._reject_backburner()

        self._sync_completed_at(task, previous_status)
        task.save()
        return self.get(task.pk)

    @staticmethod
    def _sync_completed_at(task: Task, previous_status: str):
        """Keep completed_at set exactly while the task is COMPLETED."""
        if task.status == Task.Status.COMPLETED:
            if previous_status != Task.Status.COMPLETED or task.completed_at is None:
                task.completed_at = timezone.now()
        else:
            task.completed_at = None

    def delete(self, task_id):
        """Delete a task; its subtasks go with it."""
        task = get_owned_or_404(Task, task_id, self.owner, 'Task')
        task.delete()
        logger.info(f"Deleted task {task_id} for user {self.owner.pk}")

    def delete_completed(self) -> int:
        """Delete all of the owner's COMPLETED tasks and return how many there were."""
        with transaction.atomic():
            completed = Task.objects.filter(user=self.owner, status=Task.Status.COMPLETED)
            count = completed.count()
            completed.delete()

        logger.info(f"Bulk deleted {count} completed tasks for user {self.owner.pk}")
        return count

    def stats(self) -> Dict[str, int]:
        owned = Task.objects.filter(user=self.owner)
        by_status = dict(
            owned.order_by()
            .values('status')
            .annotate(count=Count('id'))
            .values_list('status', 'count')
        )
        overdue = (
            owned.filter(due_date__lt=timezone.now())
            .exclude(status=Task.Status.COMPLETED)
            .count()
        )

        total = sum(by_status.values())
        completed = by_status.get(Task.Status.COMPLETED, 0)
        return {
            'total': total,
            'pending': by_status.get(Task.Status.PENDING, 0),
            'inProgress': by_status.get(Task.Status.IN_PROGRESS, 0),
            'completed': completed,
            'backburner': by_status.get(Task.Status.BACKBURNER, 0),
            'overdue': overdue,
            'completionRate': completion_rate(completed, total),
        }
