"""
Rate limiting classes.
"""

from rest_framework.throttling import AnonRateThrottle


class AuthRateThrottle(AnonRateThrottle):
    """Stricter per-IP limit for register, login and refresh."""
    scope = 'auth'
