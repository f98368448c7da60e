"""
Password strength rules, plugged into AUTH_PASSWORD_VALIDATORS.
"""

import re

from django.core.exceptions import ValidationError

SPECIAL_CHARACTERS = r"""[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?]"""

CHARACTER_RULES = [
    (re.compile(r'[A-Z]'), 'Password must contain at least one uppercase letter'),
    (re.compile(r'[a-z]'), 'Password must contain at least one lowercase letter'),
    (re.compile(r'\d'), 'Password must contain at least one number'),
    (re.compile(SPECIAL_CHARACTERS), 'Password must contain at least one special character'),
]


class CharacterClassValidator:
    """Require upper case, lower case, digit and special characters."""

    def validate(self, password, user=None):
        errors = [
            ValidationError(message, code='password_character_class')
            for pattern, message in CHARACTER_RULES
            if not pattern.search(password)
        ]
        if errors:
            raise ValidationError(errors)

    def get_help_text(self):
        return (
            'Your password must contain an uppercase letter, a lowercase letter, '
            'a number and a special character.'
        )
