"""
ASGI config for SeatLicenseService project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "SeatLicenseService.settings.dev")

application = get_asgi_application()
