"""
ASGI config for KeyAuthService.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "KeyAuthService.settings.dev")

application = get_asgi_application()
