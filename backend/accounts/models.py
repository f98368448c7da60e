"""
User model for FocusFlow.

Users sign in with their email address. The email is stored lower-cased so
uniqueness is effectively case-insensitive.
"""

import uuid

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Manager with email-based user creation."""

    use_in_migrations = True

    @staticmethod
    def normalize_email_address(email: str) -> str:
        return (email or '').strip().lower()

    def get_by_email(self, email: str):
        """Case-insensitive lookup; returns None when missing."""
        return self.filter(email=self.normalize_email_address(email)).first()

    def create_user(self, email: str, password=None, **extra_fields):
        if not email:
            raise ValueError('Users must have an email address')
        user = self.model(email=self.normalize_email_address(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user


class User(AbstractBaseUser):
    """
    An account that owns tasks, goals and categories.

    Attributes:
        email: Login identifier, unique, stored lower-cased
        password: Password hash (managed by Django's hashers)
        name: Optional display name
        avatar_url: Optional avatar image URL
        email_verified: Whether the address has been verified
        preferences: Free-form client preferences (theme, view options, ...)
        last_active: Last login or token refresh
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(max_length=255, unique=True)
    name = models.CharField(max_length=255, null=True, blank=True)
    avatar_url = models.URLField(max_length=500, null=True, blank=True)
    email_verified = models.BooleanField(default=False)
    preferences = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_active = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    def touch_last_active(self):
        """Record activity (login, refresh) without bumping other fields."""
        self.last_active = timezone.now()
        User.objects.filter(pk=self.pk).update(last_active=self.last_active)
