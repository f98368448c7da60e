"""
Category Service for FocusFlow.

Name uniqueness and the detach-then-delete rule for categories.
"""

import logging
from typing import Dict, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Count, QuerySet

from categories.models import DEFAULT_COLOR, Category
from common.errors import ConflictError
from common.ownership import get_owned_or_404

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Category operations scoped to one owner.

    Args:
        owner: The authenticated user every query is restricted to
    """

    DUPLICATE_MESSAGE = 'Category with this name already exists'

    def __init__(self, owner):
        self.owner = owner

    def queryset(self, include_counts: bool = False) -> QuerySet:
        queryset = Category.objects.filter(user=self.owner)
        if include_counts:
            queryset = queryset.annotate(task_count=Count('tasks'))
        return queryset.order_by('-is_favorite', 'name')

    def get(self, category_id, include_counts: bool = True) -> Category:
        return get_owned_or_404(self.queryset(include_counts), category_id, self.owner, 'Category')

    def list(self, include_counts: bool = False):
        return list(self.queryset(include_counts))

    def _ensure_unique_name(self, name: str, exclude_id=None):
        # Exact match on the trimmed name; the unique constraint is the backstop
        duplicates = Category.objects.filter(user=self.owner, name=name)
        if exclude_id is not None:
            duplicates = duplicates.exclude(pk=exclude_id)
        if duplicates.exists():
            logger.debug(f"Rejected duplicate category name {name!r} for user {self.owner.pk}")
            raise ConflictError(self.DUPLICATE_MESSAGE)

    def _save(self, category: Category):
        try:
            with transaction.atomic():
                category.save()
        except IntegrityError:
            raise ConflictError(self.DUPLICATE_MESSAGE)

    def create(self, data: Dict) -> Category:
        """
        Create a category from validated input.

        Raises:
            ConflictError: the owner already has a category with this name
        """
        name = data['name'].strip()
        self._ensure_unique_name(name)

        category = Category(
            user=self.owner,
            name=name,
            color=data.get('color') or DEFAULT_COLOR,
            description=data.get('description'),
            is_favorite=data.get('isFavorite', False),
        )
        self._save(category)
        logger.info(f"Created category {category.pk} for user {self.owner.pk}")
        return self.get(category.pk)

    def update(self, category_id, data: Dict) -> Category:
        category = get_owned_or_404(Category, category_id, self.owner, 'Category')

        if data.get('name'):
            category.name = data['name'].strip()
            self._ensure_unique_name(category.name, exclude_id=category.pk)
        if data.get('color'):
            category.color = data['color']
        if 'description' in data:
            category.description = data['description']
        if 'isFavorite' in data:
            category.is_favorite = data['isFavorite']

        self._save(category)
        return self.get(category.pk)

    def delete(self, category_id) -> Tuple[int, str]:
        """
        Detach the category's tasks, then delete it.

        Returns:
            (number of tasks moved to no category, success message)
        """
        category = get_owned_or_404(Category, category_id, self.owner, 'Category')

        with transaction.atomic():
            moved = category.tasks.update(category=None)
            category.delete()

        logger.info(f"Deleted category {category_id}; {moved} tasks moved to no category")
        return moved, self.delete_message(moved)

    @staticmethod
    def delete_message(moved: int) -> str:
        if moved > 0:
            return f"Category deleted successfully. {moved} tasks moved to no category."
        return 'Category deleted successfully'
