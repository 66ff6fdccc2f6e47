"""
Unit tests for the Lemon Squeezy key lookup adapter and its factory.
"""

import json

import pytest
import requests
from django.test import override_settings

from core.domain.exceptions import KeyLookupUnavailableError
from core.infrastructure.http import ProviderHttpClient
from licenses.infrastructure.key_lookup.factory import build_key_lookup
from licenses.infrastructure.key_lookup.lemonsqueezy import LemonSqueezyKeyLookup
from licenses.ports.key_lookup import NullKeyLookup


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b""
    return response


class FakeSession(requests.Session):
    """Session returning a canned response instead of touching the network."""

    def __init__(self, response=None, error=None):
        super().__init__()
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def make_lookup(session):
    client = ProviderHttpClient(
        base_url="https://api.example.test/", timeout=2.0, session=session
    )
    return LemonSqueezyKeyLookup(client)


@pytest.mark.asyncio
class TestLemonSqueezyKeyLookup:
    """Tests for LemonSqueezyKeyLookup."""

    async def test_found(self):
        """A license_key object in a 200 answer means found."""
        session = FakeSession(make_response(200, {"valid": True, "license_key": {"id": 1}}))

        assert await make_lookup(session).find_key("key-1") is True

        method, url, kwargs = session.calls[0]
        assert method == "POST"
        assert url == "https://api.example.test/v1/licenses/validate"
        assert kwargs["data"] == {"license_key": "key-1"}
        assert kwargs["timeout"] == 2.0

    async def test_not_found(self):
        """404 is a definite miss."""
        session = FakeSession(make_response(404, {"error": "license_key not found"}))

        assert await make_lookup(session).find_key("key-1") is False

    async def test_200_without_license_key(self):
        """A 200 without a license_key object is a miss."""
        session = FakeSession(make_response(200, {"valid": False, "error": "nope"}))

        assert await make_lookup(session).find_key("key-1") is False

    async def test_server_error_unavailable(self):
        """Unexpected statuses are indeterminate."""
        session = FakeSession(make_response(500, {}))

        with pytest.raises(KeyLookupUnavailableError):
            await make_lookup(session).find_key("key-1")

    async def test_timeout_unavailable(self):
        """Transport errors are indeterminate."""
        session = FakeSession(error=requests.exceptions.Timeout("slow"))

        with pytest.raises(KeyLookupUnavailableError):
            await make_lookup(session).find_key("key-1")


class TestBuildKeyLookup:
    """Tests for build_key_lookup."""

    @override_settings(LICENSE_KEY_VALIDATION_ENABLED=False)
    def test_disabled_returns_null_adapter(self):
        """Offline mode accepts every key."""
        assert isinstance(build_key_lookup(), NullKeyLookup)

    @override_settings(
        LICENSE_KEY_VALIDATION_ENABLED=True,
        LEMONSQUEEZY_API_URL="https://api.example.test",
        PROVIDER_HTTP_TIMEOUT_SECONDS=3.0,
    )
    def test_enabled_returns_provider_adapter(self):
        """Validation enabled builds the provider adapter."""
        lookup = build_key_lookup()

        assert isinstance(lookup, LemonSqueezyKeyLookup)
        assert lookup.client.base_url == "https://api.example.test"
        assert lookup.client.timeout == 3.0
