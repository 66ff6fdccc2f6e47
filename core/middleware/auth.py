"""
Admin API key middleware.

Administrative endpoints require the shared ``ADMIN_API_KEY`` in the
``X-API-Key`` header. Client and webhook endpoints are not affected.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

ADMIN_PATHS = ("/api/licenses/remove_seat",)


class AdminAPIKeyMiddleware(MiddlewareMixin):
    """
    Middleware guarding administrative endpoints.

    Returns 503 when no admin key is configured and 401 when the request
    does not carry the right one.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Validate the admin key for admin paths.

        Args:
            request: HTTP request

        Returns:
            JsonResponse on failure, None if the request may proceed
        """
        if not self._is_admin_path(request.path):
            return None

        expected = getattr(settings, "ADMIN_API_KEY", "")
        if not expected:
            logger.error("ADMIN_API_KEY not configured, admin endpoint disabled")
            return JsonResponse(
                {"ok": False, "error": "admin_disabled", "msg": "admin endpoints disabled"},
                status=503,
            )

        provided = request.headers.get("X-API-Key", "")
        if not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning("Invalid admin API key", extra={"path": request.path})
            return JsonResponse(
                {"ok": False, "error": "unauthorized", "msg": "invalid API key"},
                status=401,
            )
        return None

    @staticmethod
    def _is_admin_path(path: str) -> bool:
        return any(path.rstrip("/") == admin_path for admin_path in ADMIN_PATHS)
