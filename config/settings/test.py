"""Test settings.

SQLite database, fast password hashing and quiet logging for pytest.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test.sqlite3',  # noqa: F405
        'OPTIONS': {
            'timeout': SALES_STORE_TIMEOUT_SECONDS,  # noqa: F405
            'transaction_mode': 'IMMEDIATE',
        },
        # Thread tests need a file: in-memory databases cannot lock across connections.
        'TEST': {'NAME': BASE_DIR / 'test_sales.sqlite3'},  # noqa: F405
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING["root"]["level"] = "ERROR"  # noqa: F405
LOGGING["loggers"]["apps"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["shared"]["level"] = "WARNING"  # noqa: F405
