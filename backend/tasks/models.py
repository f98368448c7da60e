"""
Task Model for FocusFlow.

This module defines the Task model, its status and priority vocabularies and
the parent/subtask tree.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from categories.models import Category

MAX_HOURS = Decimal('999.99')


class Task(models.Model):
    """
    A unit of work owned by a single user.

    Attributes:
        title: Short description of the work
        description: Optional longer notes
        status: PENDING, IN_PROGRESS, COMPLETED or BACKBURNER
        priority: LOW, MEDIUM, HIGH or CRITICAL
        due_date: When the task is due (optional)
        backburner_date: When a parked task should be revisited (optional)
        completed_at: Set while the task is COMPLETED, null otherwise
        position: Manual ordering within a list
        estimated_hours: Expected effort in hours
        actual_hours: Effort spent in hours
        tags: Ordered list of free-form labels
        category: Optional category; detached when the category is deleted
        parent_task: Optional parent; subtasks are deleted with their parent
    """

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        IN_PROGRESS = 'IN_PROGRESS', 'In Progress'
        COMPLETED = 'COMPLETED', 'Completed'
        BACKBURNER = 'BACKBURNER', 'Backburner'

    class Priority(models.TextChoices):
        LOW = 'LOW', 'Low'
        MEDIUM = 'MEDIUM', 'Medium'
        HIGH = 'HIGH', 'High'
        CRITICAL = 'CRITICAL', 'Critical'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=500, help_text="Task title")
    description = models.TextField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING
    )
    priority = models.CharField(
        max_length=20,
        choices=Priority.choices,
        default=Priority.MEDIUM
    )
    due_date = models.DateTimeField(null=True, blank=True)
    backburner_date = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Date to revisit a backburner task"
    )
    completed_at = models.DateTimeField(null=True, blank=True)
    position = models.IntegerField(default=0)
    estimated_hours = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(MAX_HOURS)]
    )
    actual_hours = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(MAX_HOURS)]
    )
    tags = models.JSONField(default=list, blank=True, help_text="List of tag strings")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tasks'
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tasks'
    )
    parent_task = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='subtasks'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tasks'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='tasks_user_status_idx'),
            models.Index(fields=['user', 'due_date'], name='tasks_user_due_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"
