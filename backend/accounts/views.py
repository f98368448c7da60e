"""
Authentication endpoints.

Registration, login and token refresh are open (and rate limited by the
'auth' throttle scope) and ignore any Authorization header; logout and
the profile require an access token.
"""

import logging

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.models import User
from accounts.serializers import (
    LoginSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RefreshTokenSerializer,
    RegisterSerializer,
    UserSerializer,
)
from accounts.tokens import issue_token_pair, verify_refresh_token
from common.errors import AuthenticationError, ConflictError, ValidationError, validate_or_raise
from common.responses import created, envelope
from common.throttling import AuthRateThrottle

logger = logging.getLogger(__name__)


def _auth_payload(user: User) -> dict:
    return {
        'user': UserSerializer(user).data,
        'tokens': issue_token_pair(user),
    }


@extend_schema(
    summary="Register a new user",
    request=RegisterSerializer,
    responses={201: OpenApiTypes.OBJECT},
    examples=[
        OpenApiExample(
            'Registration',
            value={'email': 'a@b.com', 'password': 'Str0ng!Pass', 'name': 'Ada'},
            request_only=True
        )
    ],
    tags=['Auth']
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def register(request: Request) -> Response:
    """
    Create an account and return it with a fresh token pair.

    POST /api/v1/auth/register

    Request Body:
    {
        "email": "a@b.com",
        "password": "Str0ng!Pass",
        "name": "Ada"              // Optional
    }
    """
    data = validate_or_raise(RegisterSerializer(data=request.data), 'Invalid registration data')

    try:
        validate_password(data['password'])
    except DjangoValidationError as exc:
        raise ValidationError('Password does not meet requirements', list(exc.messages))

    if User.objects.get_by_email(data['email']) is not None:
        raise ConflictError('User with this email already exists')

    with transaction.atomic():
        user = User.objects.create_user(
            data['email'],
            password=data['password'],
            name=data.get('name'),
        )
        user.touch_last_active()

    logger.info(f"Registered user {user.pk}")
    return created(_auth_payload(user), 'User registered successfully')


@extend_schema(
    summary="Log in",
    request=LoginSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Auth']
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def login(request: Request) -> Response:
    """
    Exchange email and password for a token pair.

    POST /api/v1/auth/login
    """
    data = validate_or_raise(LoginSerializer(data=request.data), 'Invalid login data')

    user = User.objects.get_by_email(data['email'])
    if user is None or not user.check_password(data['password']):
        raise AuthenticationError('Invalid email or password')

    user.touch_last_active()
    return envelope(_auth_payload(user), 'Login successful')


@extend_schema(
    summary="Refresh the token pair",
    request=RefreshTokenSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Auth']
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def refresh(request: Request) -> Response:
    """
    Issue a new token pair from a valid refresh token.

    POST /api/v1/auth/refresh
    """
    data = validate_or_raise(RefreshTokenSerializer(data=request.data), 'Invalid refresh token data')

    claims = verify_refresh_token(data['refreshToken'])
    user = User.objects.filter(pk=claims['userId']).first()
    if user is None:
        raise AuthenticationError('User not found')

    user.touch_last_active()
    return envelope(_auth_payload(user), 'Token refreshed successfully')


@extend_schema(
    summary="Log out",
    description="Tokens are stateless; the client discards them.",
    request=None,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Auth']
)
@api_view(['POST'])
def logout(request: Request) -> Response:
    return envelope(message='Logout successful')


@extend_schema(
    methods=['GET'],
    summary="Get the current user's profile",
    responses={200: ProfileSerializer},
    tags=['Auth']
)
@extend_schema(
    methods=['PUT'],
    summary="Update the current user's profile",
    request=ProfileUpdateSerializer,
    responses={200: ProfileSerializer},
    tags=['Auth']
)
@api_view(['GET', 'PUT'])
def profile(request: Request) -> Response:
    """
    GET  /api/v1/auth/profile
    PUT  /api/v1/auth/profile   { "name", "avatarUrl", "preferences" }
    """
    user = request.user
    if request.method == 'GET':
        return envelope(ProfileSerializer(user).data)

    serializer = ProfileUpdateSerializer(data=request.data)
    validate_or_raise(serializer, 'Invalid profile data')
    serializer.apply(user)
    return envelope(ProfileSerializer(user).data, 'Profile updated successfully')
