"""
Serializers for the Category model.
"""

from rest_framework import serializers

from categories.models import Category, color_validator


class CategoryInputSerializer(serializers.Serializer):
    """
    Validate category create/update payloads.

    Use partial=True for updates so every field becomes optional.
    """

    name = serializers.CharField(
        max_length=255,
        error_messages={
            'blank': 'Name is required',
            'required': 'Name is required',
            'max_length': 'Name too long',
        }
    )
    color = serializers.CharField(max_length=7, required=False, validators=[color_validator])
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    isFavorite = serializers.BooleanField(required=False)

    def validate_description(self, value):
        """Blank descriptions are stored as null."""
        if value is None:
            return None
        return value.strip() or None


class CategorySerializer(serializers.ModelSerializer):
    """
    Category output.

    taskCount is present when the queryset was annotated with task_count.
    """

    isFavorite = serializers.BooleanField(source='is_favorite', read_only=True)
    userId = serializers.UUIDField(source='user_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    taskCount = serializers.IntegerField(source='task_count', read_only=True)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'color', 'description', 'isFavorite', 'userId',
            'createdAt', 'updatedAt', 'taskCount',
        ]
        read_only_fields = fields
