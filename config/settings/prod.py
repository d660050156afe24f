"""Production settings.

Extends the base settings with production specific configuration. Ensure
that sensitive values are provided via environment variables.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')  # noqa: F405

# Configure secure proxies and cookies
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

# Keep connections open between requests; the sales service runs short transactions
CONN_MAX_AGE = int(os.environ.get('DB_CONN_MAX_AGE', '60'))  # noqa: F405
