"""Production settings for the equipment rental project.

This module extends the base settings with production specific
configuration. Sensitive values must come from environment variables.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)  # noqa: F405

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = [
    host.strip() for host in get_env('DJANGO_ALLOWED_HOSTS', required=True).split(',')  # noqa: F405
    if host.strip()
]

# Configure secure proxies and cookies
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
