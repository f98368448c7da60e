"""
Goal model.

Goals form a tree through parent_goal; deleting a goal deletes its subgoals.
"""

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Goal(models.Model):
    """
    A longer-term objective with a progress percentage.

    Attributes:
        title: What the goal is
        description: Optional notes
        category: Broad area of life the goal belongs to
        target_date: Optional deadline
        progress_percentage: 0-100
        is_completed: Forced true when progress reaches 100, unless the
            same update explicitly says otherwise
        parent_goal: Optional parent goal
    """

    class Category(models.TextChoices):
        PERSONAL_GROWTH = 'PERSONAL_GROWTH', 'Personal Growth'
        PROFESSIONAL = 'PROFESSIONAL', 'Professional'
        HEALTH = 'HEALTH', 'Health'
        FINANCIAL = 'FINANCIAL', 'Financial'
        LEARNING = 'LEARNING', 'Learning'
        OTHER = 'OTHER', 'Other'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=500)
    description = models.TextField(null=True, blank=True)
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        default=Category.OTHER
    )
    target_date = models.DateTimeField(null=True, blank=True)
    progress_percentage = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    is_completed = models.BooleanField(default=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='goals'
    )
    parent_goal = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='subgoals'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'goals'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.progress_percentage}%)"
