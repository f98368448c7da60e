"""
Query predicates for the task list.

Each filter rule is a small builder returning a Q object so it can be tested
on its own; filter_tasks() combines them from request query parameters.
"""

import uuid
from datetime import datetime, time, timedelta
from datetime import timezone as dt_timezone
from typing import Iterable, List, Optional

from django.db import connections
from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from common.errors import ValidationError
from tasks.models import Task

NULL_SENTINEL = 'null'

# Wire name -> model field
SORT_FIELDS = {
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
    'dueDate': 'due_date',
    'backburnerDate': 'backburner_date',
    'completedAt': 'completed_at',
    'priority': 'priority',
    'status': 'status',
    'title': 'title',
    'position': 'position',
    'estimatedHours': 'estimated_hours',
    'actualHours': 'actual_hours',
}
SORT_ORDERS = ('asc', 'desc')
DEFAULT_SORT_BY = 'createdAt'
DEFAULT_SORT_ORDER = 'desc'


def multi_value(params, name: str) -> List[str]:
    """
    Read a filter that may be repeated (?status=A&status=B) or
    comma-separated (?status=A,B).
    """
    values = []
    for raw in params.getlist(name):
        values.extend(part.strip() for part in raw.split(','))
    return [value for value in values if value]


def _parse_uuid(value: str, name: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {name}", [f"{name}: Must be a valid UUID"])


def _check_choices(values: Iterable[str], allowed, name: str) -> List[str]:
    values = list(values)
    invalid = [value for value in values if value not in allowed]
    if invalid:
        raise ValidationError(
            f"Invalid {name} filter",
            [f"{name}: '{value}' is not one of {', '.join(allowed)}" for value in invalid]
        )
    return values


def status_predicate(statuses: Iterable[str]) -> Q:
    """Any of the given statuses (OR)."""
    return Q(status__in=_check_choices(statuses, Task.Status.values, 'status'))


def priority_predicate(priorities: Iterable[str]) -> Q:
    """Any of the given priorities (OR)."""
    return Q(priority__in=_check_choices(priorities, Task.Priority.values, 'priority'))


def category_predicate(category_id: str) -> Q:
    return Q(category_id=_parse_uuid(category_id, 'categoryId'))


def search_predicate(text: str) -> Q:
    """Case-insensitive match against title OR description."""
    return Q(title__icontains=text) | Q(description__icontains=text)


def parse_day_start(value: str) -> datetime:
    """
    Start of the calendar day named by value.

    Accepts a plain date (taken as UTC midnight) or an ISO 8601 datetime
    (used as-is; naive values are taken as UTC).
    """
    try:
        moment = parse_datetime(value)
        if moment is None:
            day = parse_date(value)
            if day is not None:
                moment = datetime.combine(day, time.min)
    except ValueError:
        moment = None

    if moment is None:
        raise ValidationError('Invalid dueDate filter', ['dueDate: Must be an ISO 8601 date'])
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment, dt_timezone.utc)
    return moment


def due_on_predicate(value: str) -> Q:
    """Due within [day, day + 1 day)."""
    start = parse_day_start(value)
    return Q(due_date__gte=start, due_date__lt=start + timedelta(days=1))


def parent_predicate(value: str) -> Q:
    """The "null" sentinel selects top-level tasks; otherwise an exact parent id."""
    if value == NULL_SENTINEL:
        return Q(parent_task__isnull=True)
    return Q(parent_task_id=_parse_uuid(value, 'parentTaskId'))


def apply_tag_filter(queryset: QuerySet, tags: List[str]) -> QuerySet:
    """
    Keep tasks carrying every one of the given tags (AND).

    Uses JSON containment where the database supports it. SQLite has no
    JSON containment lookup, so there the matching ids are computed in Python.
    """
    if not tags:
        return queryset

    if connections[queryset.db].features.supports_json_field_contains:
        return queryset.filter(tags__contains=list(tags))

    wanted = set(tags)
    matching = [
        pk for pk, task_tags in queryset.values_list('id', 'tags')
        if wanted.issubset(task_tags or [])
    ]
    return queryset.filter(id__in=matching)


def ordering_from_params(params) -> List[str]:
    """
    Translate sortBy/sortOrder into an order_by() list.

    Raises:
        ValidationError: unknown sort field or direction
    """
    sort_by = params.get('sortBy') or DEFAULT_SORT_BY
    sort_order = (params.get('sortOrder') or DEFAULT_SORT_ORDER).lower()

    if sort_by not in SORT_FIELDS:
        raise ValidationError(
            'Invalid sort field',
            [f"sortBy: must be one of {', '.join(SORT_FIELDS)}"]
        )
    if sort_order not in SORT_ORDERS:
        raise ValidationError('Invalid sort order', ["sortOrder: must be 'asc' or 'desc'"])

    prefix = '-' if sort_order == 'desc' else ''
    # Tie-break on id so pages never overlap
    return [f"{prefix}{SORT_FIELDS[sort_by]}", f"{prefix}id"]


def filter_tasks(queryset: QuerySet, params) -> QuerySet:
    """Apply every filter present in the query parameters."""
    predicates = []

    statuses = multi_value(params, 'status')
    if statuses:
        predicates.append(status_predicate(statuses))

    priorities = multi_value(params, 'priority')
    if priorities:
        predicates.append(priority_predicate(priorities))

    category_id: Optional[str] = params.get('categoryId')
    if category_id:
        predicates.append(category_predicate(category_id))

    search = (params.get('search') or '').strip()
    if search:
        predicates.append(search_predicate(search))

    due_date = params.get('dueDate')
    if due_date:
        predicates.append(due_on_predicate(due_date))

    parent_task_id = params.get('parentTaskId')
    if parent_task_id:
        predicates.append(parent_predicate(parent_task_id))

    for predicate in predicates:
        queryset = queryset.filter(predicate)

    return apply_tag_filter(queryset, multi_value(params, 'tags'))
