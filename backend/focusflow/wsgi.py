"""
WSGI config for the FocusFlow API.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'focusflow.settings')

application = get_wsgi_application()
