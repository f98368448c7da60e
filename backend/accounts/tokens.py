"""
JWT access/refresh tokens.

Both tokens are HS256 JWTs carrying the user's id and email. They are signed
with different secrets, so a refresh token is never accepted as an access
token and vice versa.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict

from django.conf import settings
from jose import JWTError, jwt

from common.errors import AuthenticationError

logger = logging.getLogger(__name__)


def _jwt_config():
    return settings.FOCUSFLOW.jwt


def _sign(user, secret: str, lifetime: timedelta) -> str:
    config = _jwt_config()
    now = datetime.now(timezone.utc)
    claims = {
        'userId': str(user.pk),
        'email': user.email,
        'iat': now,
        'exp': now + lifetime,
        'iss': config.issuer,
        'aud': config.audience,
    }
    return jwt.encode(claims, secret, algorithm=config.algorithm)


def _verify(token: str, secret: str, failure_message: str) -> Dict:
    config = _jwt_config()
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[config.algorithm],
            audience=config.audience,
            issuer=config.issuer,
        )
    except JWTError as exc:
        logger.debug(f"Token rejected: {exc}")
        raise AuthenticationError(failure_message)

    if not claims.get('userId'):
        raise AuthenticationError(failure_message)
    return claims


def generate_access_token(user) -> str:
    config = _jwt_config()
    return _sign(user, config.secret, config.expires_in)


def generate_refresh_token(user) -> str:
    config = _jwt_config()
    return _sign(user, config.refresh_secret, config.refresh_expires_in)


def issue_token_pair(user) -> Dict[str, str]:
    """Return {'accessToken', 'refreshToken'} for the user."""
    return {
        'accessToken': generate_access_token(user),
        'refreshToken': generate_refresh_token(user),
    }


def verify_access_token(token: str) -> Dict:
    """Decode an access token or raise AuthenticationError."""
    return _verify(token, _jwt_config().secret, 'Invalid or expired access token')


def verify_refresh_token(token: str) -> Dict:
    """Decode a refresh token or raise AuthenticationError."""
    return _verify(token, _jwt_config().refresh_secret, 'Invalid or expired refresh token')
