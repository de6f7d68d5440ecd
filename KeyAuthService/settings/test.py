"""
Test settings for KeyAuthService.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

# File-backed SQLite so threaded tests share one database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": str(BASE_DIR / "test_db.sqlite3"),  # noqa: F405
        "OPTIONS": {
            "timeout": 5,
            "transaction_mode": "IMMEDIATE",
        },
        "TEST": {
            "NAME": str(BASE_DIR / "test_db.sqlite3"),  # noqa: F405
        },
    }
}

ADMIN_SECRET = "test-admin-secret"

KEY_AUTH = {
    "POLICY_MODE": "fixed_date",
    "STORE_BACKEND": "django",
    "STORE_LOCK_TIMEOUT": 1.0,
    "KEY_GENERATION_ATTEMPTS": 5,
}

# Disable logging during tests
LOGGING_CONFIG = None
