"""
Category model.

Categories are per-user labels for tasks. Deleting a category detaches its
tasks rather than deleting them.
"""

import uuid

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models

DEFAULT_COLOR = '#007AFF'

color_validator = RegexValidator(
    regex=r'^#[0-9A-Fa-f]{6}$',
    message='Invalid color format'
)


class Category(models.Model):
    """
    A user-defined task category.

    Attributes:
        name: Display name, unique per user
        color: Hex colour code, e.g. #007AFF
        description: Optional free text
        is_favorite: Favourites are listed first
        user: Owner
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    color = models.CharField(
        max_length=7,
        default=DEFAULT_COLOR,
        validators=[color_validator],
        help_text="Hex colour code, e.g. #007AFF"
    )
    description = models.TextField(null=True, blank=True)
    is_favorite = models.BooleanField(default=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='categories'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['-is_favorite', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'name'],
                name='unique_category_name_per_user'
            )
        ]

    def __str__(self):
        return self.name
