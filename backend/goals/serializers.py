"""
Serializers for the Goal model.
"""

from rest_framework import serializers

from goals.models import Goal


class GoalInputSerializer(serializers.Serializer):
    """
    Validate goal create/update payloads.

    progressPercentage and isCompleted are only meaningful on update; a new
    goal always starts at 0% and incomplete.
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
    category = serializers.ChoiceField(choices=Goal.Category.choices, required=False)
    targetDate = serializers.DateTimeField(required=False, allow_null=True)
    parentGoalId = serializers.UUIDField(required=False, allow_null=True)
    progressPercentage = serializers.IntegerField(min_value=0, max_value=100, required=False)
    isCompleted = serializers.BooleanField(required=False)

    def validate_description(self, value):
        if value is None:
            return None
        return value.strip() or None


class LeafGoalSerializer(serializers.ModelSerializer):
    """Goal output without subgoals."""

    targetDate = serializers.DateTimeField(source='target_date', read_only=True)
    progressPercentage = serializers.IntegerField(source='progress_percentage', read_only=True)
    isCompleted = serializers.BooleanField(source='is_completed', read_only=True)
    userId = serializers.UUIDField(source='user_id', read_only=True)
    parentGoalId = serializers.UUIDField(source='parent_goal_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Goal
        fields = [
            'id', 'title', 'description', 'category', 'targetDate',
            'progressPercentage', 'isCompleted', 'userId', 'parentGoalId',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class SubgoalSerializer(LeafGoalSerializer):
    subgoals = LeafGoalSerializer(many=True, read_only=True)

    class Meta(LeafGoalSerializer.Meta):
        fields = LeafGoalSerializer.Meta.fields + ['subgoals']
        read_only_fields = fields


class GoalSerializer(LeafGoalSerializer):
    """Goal output with two levels of subgoals."""

    subgoals = SubgoalSerializer(many=True, read_only=True)

    class Meta(LeafGoalSerializer.Meta):
        fields = LeafGoalSerializer.Meta.fields + ['subgoals']
        read_only_fields = fields


class GoalStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    completed = serializers.IntegerField()
    inProgress = serializers.IntegerField()
    averageProgress = serializers.IntegerField()
    completionRate = serializers.IntegerField()
