"""
Serializers for registration, login, token refresh and the user profile.
"""

from rest_framework import serializers

from accounts.models import User


class RegisterSerializer(serializers.Serializer):
    """Validate a registration request. Password strength is checked in the view."""

    email = serializers.EmailField(
        max_length=255,
        error_messages={'invalid': 'Invalid email format'}
    )
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages={'blank': 'Password is required', 'required': 'Password is required'}
    )
    name = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        allow_null=True
    )

    def validate_name(self, value):
        """Blank names are stored as null."""
        if value is None:
            return None
        return value.strip() or None


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages={'blank': 'Password is required', 'required': 'Password is required'}
    )


class RefreshTokenSerializer(serializers.Serializer):
    refreshToken = serializers.CharField(
        error_messages={'blank': 'Refresh token is required', 'required': 'Refresh token is required'}
    )


class UserSerializer(serializers.ModelSerializer):
    """The public view of a user returned alongside tokens."""

    avatarUrl = serializers.CharField(source='avatar_url', read_only=True)
    emailVerified = serializers.BooleanField(source='email_verified', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'avatarUrl', 'emailVerified', 'createdAt']
        read_only_fields = fields


class ProfileSerializer(UserSerializer):
    """The full profile, including preferences and activity timestamps."""

    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    lastActive = serializers.DateTimeField(source='last_active', read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['preferences', 'updatedAt', 'lastActive']
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    """Partial profile update; every field is optional."""

    name = serializers.CharField(min_length=1, max_length=255, required=False)
    avatarUrl = serializers.URLField(max_length=500, required=False)
    preferences = serializers.DictField(required=False)

    FIELD_MAP = {
        'name': 'name',
        'avatarUrl': 'avatar_url',
        'preferences': 'preferences',
    }

    def apply(self, user: User) -> User:
        """Copy the validated fields onto the user and save them."""
        changed = []
        for wire_name, attr in self.FIELD_MAP.items():
            if wire_name in self.validated_data:
                setattr(user, attr, self.validated_data[wire_name])
                changed.append(attr)
        if changed:
            user.save(update_fields=changed + ['updated_at'])
        return user
