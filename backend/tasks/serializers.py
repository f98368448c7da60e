"""
Serializers for the Task model.

Input serializers validate request payloads (camelCase on the wire); the
output serializers shape tasks for responses, embedding the category and one
level of subtasks.
"""

from decimal import ROUND_HALF_UP

from rest_framework import serializers

from categories.serializers import CategorySerializer
from tasks.models import MAX_HOURS, Task


def _hours_field():
    return serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=MAX_HOURS,
        rounding=ROUND_HALF_UP,
        required=False,
        allow_null=True
    )


class TaskInputSerializer(serializers.Serializer):
    """
    Serializer for validating incoming task data.

    Create uses it as-is; update passes partial=True so only supplied fields
    are validated and merged. Cross-field rules (backburner dates, ownership
    of references) live in TaskService.
    """

    title = serializers.CharField(
        max_length=500,
        error_messages={
            'blank': 'Title is required',
            'required': 'Title is required',
            'max_length': 'Title too long',
        }
    )
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=Task.Status.choices, required=False)
    priority = serializers.ChoiceField(choices=Task.Priority.choices, required=False)
    dueDate = serializers.DateTimeField(required=False, allow_null=True)
    backburnerDate = serializers.DateTimeField(required=False, allow_null=True)
    categoryId = serializers.UUIDField(required=False, allow_null=True)
    parentTaskId = serializers.UUIDField(required=False, allow_null=True)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False
    )
    estimatedHours = _hours_field()
    actualHours = _hours_field()
    position = serializers.IntegerField(required=False)

    def validate_description(self, value):
        """Blank descriptions are stored as null."""
        if value is None:
            return None
        return value.strip() or None

    def validate_tags(self, value):
        """Drop repeated tags, keeping first-seen order."""
        return list(dict.fromkeys(value))


class SubtaskSerializer(serializers.ModelSerializer):
    """Task output without nested subtasks."""

    dueDate = serializers.DateTimeField(source='due_date', read_only=True)
    backburnerDate = serializers.DateTimeField(source='backburner_date', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)
    estimatedHours = serializers.FloatField(source='estimated_hours', read_only=True)
    actualHours = serializers.FloatField(source='actual_hours', read_only=True)
    userId = serializers.UUIDField(source='user_id', read_only=True)
    categoryId = serializers.UUIDField(source='category_id', read_only=True)
    parentTaskId = serializers.UUIDField(source='parent_task_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    category = CategorySerializer(read_only=True)

    class Meta:
        model = Task
        fields = [
            'id', 'title', 'description', 'status', 'priority',
            'dueDate', 'backburnerDate', 'completedAt', 'position',
            'estimatedHours', 'actualHours', 'tags',
            'userId', 'categoryId', 'parentTaskId',
            'createdAt', 'updatedAt', 'category',
        ]
        read_only_fields = fields


class TaskSerializer(SubtaskSerializer):
    """Task output with its direct subtasks."""

    subtasks = SubtaskSerializer(many=True, read_only=True)

    class Meta(SubtaskSerializer.Meta):
        fields = SubtaskSerializer.Meta.fields + ['subtasks']
        read_only_fields = fields


class TaskStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    pending = serializers.IntegerField()
    inProgress = serializers.IntegerField()
    completed = serializers.IntegerField()
    backburner = serializers.IntegerField()
    overdue = serializers.IntegerField()
    completionRate = serializers.IntegerField()
