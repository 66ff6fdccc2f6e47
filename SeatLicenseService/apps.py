"""
App configuration for Seat License Service.
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

# Management commands that never serve requests
SKIPPED_COMMANDS = ("migrate", "makemigrations", "collectstatic", "check", "createsuperuser")


class SeatLicenseServiceConfig(AppConfig):
    """App configuration for SeatLicenseService."""

    name = "SeatLicenseService"
    verbose_name = "Seat License Service"

    def ready(self):
        """Register event handlers and set up tracing once apps are loaded."""
        from core.infrastructure.event_handlers import register_event_handlers

        # Audit and metrics subscribers are needed by every process that
        # runs handlers, tests included.
        register_event_handlers()

        if len(sys.argv) > 1 and sys.argv[1] in SKIPPED_COMMANDS:
            return
        # Django's autoreloader imports the project twice
        if os.environ.get("RUN_MAIN") == "false":
            return

        from core.instrumentation import setup_opentelemetry

        logger.info("Setting up observability...")
        setup_opentelemetry()
