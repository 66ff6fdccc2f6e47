"""
Outbound HTTP client for the payment provider API.

A thin wrapper around a ``requests`` session that applies the configured
base URL, timeout and auth header, records call latency and converts
transport failures into one exception type.
"""
import logging
import time
from typing import Any, Dict, Optional

import requests
from asgiref.sync import sync_to_async

from core.metrics import errors_total, provider_lookup_duration_seconds

logger = logging.getLogger(__name__)


class ProviderRequestError(Exception):
    """Raised when the provider could not be reached or timed out."""


class ProviderHttpClient:
    """Blocking ``requests`` client with an async entry point."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.api+json",
                "User-Agent": "Seat-License-Service/1.0",
            }
        )
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"

    def request(self, method: str, path: str, operation: str, **kwargs: Any) -> requests.Response:
        """
        Send a request to the provider.

        Args:
            method: HTTP method
            path: Path below the base URL
            operation: Metric label for the call

        Returns:
            The response, whatever its status code

        Raises:
            ProviderRequestError: On timeout or transport error
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        start_time = time.time()
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            errors_total.labels(error_type=type(e).__name__, endpoint=operation).inc()
            logger.warning(
                f"Provider request failed: {operation} - {e}",
                extra={"operation": operation, "url": url},
            )
            raise ProviderRequestError(str(e)) from e
        finally:
            provider_lookup_duration_seconds.labels(operation=operation).observe(
                time.time() - start_time
            )

    async def arequest(self, method: str, path: str, operation: str, **kwargs: Any) -> requests.Response:
        """Run :meth:`request` in a worker thread."""
        return await sync_to_async(self.request, thread_sensitive=False)(
            method, path, operation, **kwargs
        )

    @staticmethod
    def json(response: requests.Response) -> Dict[str, Any]:
        """Decode a JSON object body, or return an empty dict."""
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
