"""
App configuration for KeyAuth Service.
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class KeyAuthServiceConfig(AppConfig):
    """App configuration for KeyAuthService."""

    name = "KeyAuthService"
    verbose_name = "KeyAuth Service"

    def ready(self):
        """Called when Django starts."""
        # Event handlers are needed by every entry point, including create_key.
        self.register_event_handlers()

        # Skip tracing setup for management commands that never serve requests
        if len(sys.argv) > 1 and sys.argv[1] in [
            "migrate",
            "makemigrations",
            "collectstatic",
            "shell",
            "check",
        ]:
            return

        # Django's reloader runs code twice; RUN_MAIN is "false" in the watcher process
        if os.environ.get("RUN_MAIN") == "false":
            return

        logger.info("Setting up observability...")
        self.setup_observability()

    def setup_observability(self):
        """Setup observability after apps are ready."""
        from core.instrumentation import setup_opentelemetry

        setup_opentelemetry()

    def register_event_handlers(self):
        """Register event handlers after apps are ready."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
