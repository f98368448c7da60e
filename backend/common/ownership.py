"""
Ownership guard.

Every read, update and delete of a user-owned row goes through one of these
helpers. A row that exists but belongs to someone else is reported exactly
like a row that does not exist.
"""

import logging
import uuid
from typing import Optional, Type, Union

from django.db import models

from common.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _owned_queryset(source: Union[Type[models.Model], models.QuerySet], owner) -> models.QuerySet:
    queryset = source if isinstance(source, models.QuerySet) else source._default_manager.all()
    return queryset.filter(user=owner)


def find_owned(source, pk, owner):
    """Return the owner's row with this primary key, or None."""
    key = _as_uuid(pk)
    if key is None:
        return None
    return _owned_queryset(source, owner).filter(pk=key).first()


def get_owned_or_404(source, pk, owner, label: str):
    """
    Fetch a row that must belong to owner.

    Args:
        source: Model class or queryset (use a queryset to add select_related)
        pk: Primary key from the URL or payload
        owner: The authenticated user
        label: Entity name for the error message, e.g. 'Task'

    Raises:
        NotFoundError: row missing or owned by another user
    """
    row = find_owned(source, pk, owner)
    if row is None:
        logger.debug(f"{label} {pk} not visible to user {owner.pk}")
        raise NotFoundError(f"{label} not found")
    return row


def resolve_owned_reference(source, pk, owner, message: str):
    """
    Check a reference carried in a request payload (category, parent).

    Unlike get_owned_or_404, a bad reference is invalid input, not a
    missing resource.

    Raises:
        ValidationError: row missing or owned by another user
    """
    row = find_owned(source, pk, owner)
    if row is None:
        raise ValidationError(message)
    return row


def would_create_cycle(node, new_parent, parent_attr: str) -> bool:
    """
    True if making new_parent the parent of node would put node among its
    own ancestors.

    Walks upwards from new_parent following parent_attr ('parent_task_id',
    'parent_goal_id'). The walk is bounded by the set of visited ids, so an
    existing cycle in the data cannot loop forever.
    """
    if new_parent is None:
        return False

    model = type(node)
    target = node.pk
    current_id = new_parent.pk
    seen = set()
    while current_id is not None and current_id not in seen:
        if current_id == target:
            return True
        seen.add(current_id)
        current_id = (
            model._default_manager.filter(pk=current_id)
            .values_list(parent_attr, flat=True)
            .first()
        )
    return False
