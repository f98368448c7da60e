"""
Password hashing.
"""

from django.conf import settings
from django.contrib.auth.hashers import BCryptSHA256PasswordHasher


class FocusFlowBCryptHasher(BCryptSHA256PasswordHasher):
    """bcrypt with the work factor taken from BCRYPT_ROUNDS."""

    @property
    def rounds(self):
        return settings.FOCUSFLOW.bcrypt_rounds
