"""
Development settings for KeyAuthService.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Local development works without exporting ADMIN_SECRET.
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "dev-admin-secret")
