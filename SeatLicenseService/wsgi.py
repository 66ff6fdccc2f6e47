"""
WSGI config for SeatLicenseService project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "SeatLicenseService.settings.dev")

application = get_wsgi_application()
