"""
Production settings for KeyAuthService.
"""

import os

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403, F401

DEBUG = False

# Security settings
SECURE_SSL_REDIRECT = os.environ.get("SECURE_SSL_REDIRECT", "true").lower() == "true"
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

if not os.environ.get("SECRET_KEY"):
    raise ImproperlyConfigured("SECRET_KEY must be set in production")

if not ADMIN_SECRET:  # noqa: F405
    raise ImproperlyConfigured("ADMIN_SECRET must be set in production")

# Logging in production
if os.environ.get("LOG_FILE"):
    LOGGING["handlers"]["file"] = {  # noqa: F405
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.environ["LOG_FILE"],
        "maxBytes": 1024 * 1024 * 10,  # 10 MB
        "backupCount": 10,
        "formatter": "json",
    }
    LOGGING["root"]["handlers"].append("file")  # noqa: F405
