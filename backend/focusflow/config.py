"""
FocusFlow Configuration

Loads runtime settings from environment variables and validates them at
startup. Django settings are derived from the resulting AppConfig, so a bad
environment fails fast with ImproperlyConfigured instead of surfacing later
as a broken request.
"""

from __future__ import annotations

import logging
import os
import re
import secrets
from dataclasses import asdict, dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Mapping, Optional
from urllib.parse import unquote, urlparse

from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent

ENVIRONMENTS = ('development', 'production', 'test')
LOG_LEVELS = {
    'error': 'ERROR',
    'warn': 'WARNING',
    'info': 'INFO',
    'debug': 'DEBUG',
}

MIN_SECRET_LENGTH = 32
DURATION_PATTERN = re.compile(r'^(\d+)\s*([smhd])$')
DURATION_UNITS = {'s': 'seconds', 'm': 'minutes', 'h': 'hours', 'd': 'days'}


@dataclass
class DatabaseConfig:
    """Database connection settings."""

    url: str = f"sqlite:///{BASE_DIR / 'focusflow.sqlite3'}"

    def to_django(self) -> Dict:
        """Translate the URL into a Django DATABASES entry."""
        # Hosting providers hand out postgres://, Django wants postgresql
        url = self.url
        if url.startswith('postgres://'):
            url = url.replace('postgres://', 'postgresql://', 1)

        parsed = urlparse(url)
        if parsed.scheme == 'sqlite':
            # sqlite:///relative.db and sqlite:////abs/path.db
            name = url[len('sqlite:///'):] or ':memory:'
            return {'ENGINE': 'django.db.backends.sqlite3', 'NAME': name}

        if parsed.scheme == 'postgresql':
            return {
                'ENGINE': 'django.db.backends.postgresql',
                'NAME': parsed.path.lstrip('/'),
                'USER': unquote(parsed.username or ''),
                'PASSWORD': unquote(parsed.password or ''),
                'HOST': parsed.hostname or '',
                'PORT': str(parsed.port or ''),
            }

        raise ImproperlyConfigured(
            f"Unsupported DATABASE_URL scheme '{parsed.scheme}'. Use sqlite or postgres."
        )


@dataclass
class JWTConfig:
    """Token signing settings."""

    secret: str = ''
    refresh_secret: str = ''
    expires_in: timedelta = timedelta(minutes=15)
    refresh_expires_in: timedelta = timedelta(days=7)
    issuer: str = 'focusflow-api'
    audience: str = 'focusflow-client'
    algorithm: str = 'HS256'


@dataclass
class RateLimitConfig:
    """DRF throttle rates."""

    user: str = '400/hour'
    anon: str = '100/hour'
    auth: str = '20/min'


@dataclass
class AppConfig:
    """
    Complete FocusFlow configuration.

    Built from environment variables by load_config().
    """

    environment: str = 'development'
    secret_key: str = ''
    port: int = 3001
    cors_origin: str = 'http://localhost:5173'
    bcrypt_rounds: int = 12
    log_level: str = 'INFO'
    enable_swagger: bool = True
    allowed_hosts: List[str] = field(default_factory=lambda: ['*'])
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    jwt: JWTConfig = field(default_factory=JWTConfig)
    rate_limits: RateLimitConfig = field(default_factory=RateLimitConfig)

    @property
    def is_production(self) -> bool:
        return self.environment == 'production'

    @property
    def is_test(self) -> bool:
        return self.environment == 'test'

    def to_dict(self) -> dict:
        """Convert to dictionary for display (masks secrets)."""
        result = asdict(self)
        result['secret_key'] = '***'
        result['jwt']['secret'] = '***'
        result['jwt']['refresh_secret'] = '***'
        result['jwt']['expires_in'] = str(self.jwt.expires_in)
        result['jwt']['refresh_expires_in'] = str(self.jwt.refresh_expires_in)

        url = result['database']['url']
        if '@' in url:
            scheme, _, rest = url.partition('://')
            result['database']['url'] = f"{scheme}://***@{rest.split('@', 1)[1]}"

        return result


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration such as '15m' or '7d'.

    Plain integers are taken as seconds.
    """
    value = value.strip()
    if value.isdigit():
        return timedelta(seconds=int(value))

    match = DURATION_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid duration '{value}'. Use forms like 30s, 15m, 12h or 7d.")

    amount, unit = match.groups()
    return timedelta(**{DURATION_UNITS[unit]: int(amount)})


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _parse_int(env: Mapping[str, str], name: str, default: int, low: int, high: int) -> int:
    raw = env.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ImproperlyConfigured(f"{name} must be an integer, got '{raw}'")
    if not low <= value <= high:
        raise ImproperlyConfigured(f"{name} must be between {low} and {high}, got {value}")
    return value


def _resolve_secret(env: Mapping[str, str], name: str, environment: str) -> str:
    """Read a signing secret, generating a throwaway one outside production."""
    value = env.get(name, '')
    if value:
        if len(value) < MIN_SECRET_LENGTH:
            raise ImproperlyConfigured(
                f"{name} must be at least {MIN_SECRET_LENGTH} characters long"
            )
        return value

    if environment == 'production':
        raise ImproperlyConfigured(f"{name} environment variable is required in production")

    if environment != 'test':
        logger.warning(f"{name} not set; using a generated secret. Tokens will not survive a restart.")
    return secrets.token_urlsafe(48)


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Load configuration from environment variables.

    Args:
        env: Optional mapping to read instead of os.environ (used by tests)

    Returns:
        AppConfig instance

    Raises:
        ImproperlyConfigured: if any value is missing or invalid
    """
    env = os.environ if env is None else env

    environment = env.get('FOCUSFLOW_ENV', 'development').lower()
    if environment not in ENVIRONMENTS:
        raise ImproperlyConfigured(
            f"FOCUSFLOW_ENV must be one of: {', '.join(ENVIRONMENTS)}"
        )

    config = AppConfig(environment=environment)

    config.secret_key = env.get('SECRET_KEY', '')
    if not config.secret_key:
        if config.is_production:
            raise ImproperlyConfigured('SECRET_KEY environment variable is required in production')
        config.secret_key = 'focusflow-insecure-development-key'

    config.port = _parse_int(env, 'PORT', 3001, 1, 65535)
    config.bcrypt_rounds = _parse_int(env, 'BCRYPT_ROUNDS', 12, 10, 15)

    cors_origin = env.get('CORS_ORIGIN', '')
    if cors_origin:
        config.cors_origin = cors_origin
    elif config.is_production:
        raise ImproperlyConfigured('CORS_ORIGIN is required for production')
    if config.is_production and not urlparse(config.cors_origin).netloc:
        raise ImproperlyConfigured('CORS_ORIGIN must be a valid URL in production')

    log_level = env.get('LOG_LEVEL', 'info').lower()
    if log_level not in LOG_LEVELS:
        raise ImproperlyConfigured(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
    config.log_level = LOG_LEVELS[log_level]

    if 'ENABLE_SWAGGER' in env:
        config.enable_swagger = _parse_bool(env['ENABLE_SWAGGER'])

    if env.get('ALLOWED_HOSTS'):
        config.allowed_hosts = [h.strip() for h in env['ALLOWED_HOSTS'].split(',') if h.strip()]

    if env.get('DATABASE_URL'):
        config.database.url = env['DATABASE_URL']

    try:
        config.jwt = JWTConfig(
            secret=_resolve_secret(env, 'JWT_SECRET', environment),
            refresh_secret=_resolve_secret(env, 'JWT_REFRESH_SECRET', environment),
            expires_in=parse_duration(env.get('JWT_EXPIRES_IN', '15m')),
            refresh_expires_in=parse_duration(env.get('JWT_REFRESH_EXPIRES_IN', '7d')),
        )
    except ValueError as e:
        raise ImproperlyConfigured(str(e))

    config.rate_limits = RateLimitConfig(
        user=env.get('RATE_LIMIT_USER', RateLimitConfig.user),
        anon=env.get('RATE_LIMIT_ANON', RateLimitConfig.anon),
        auth=env.get('RATE_LIMIT_AUTH', RateLimitConfig.auth),
    )

    return config
