"""
Unit tests for the Lemon Squeezy seat quantity adapter and its factory.
"""

import json

import pytest
import requests
from django.test import override_settings

from billing.infrastructure.seat_quantity.factory import build_seat_quantity
from billing.infrastructure.seat_quantity.lemonsqueezy import LemonSqueezySeatQuantity
from billing.ports.seat_quantity import NullSeatQuantity
from core.infrastructure.http import ProviderHttpClient


class CannedSession(requests.Session):
    def __init__(self, status_code=200, body=None, error=None):
        super().__init__()
        self.status_code = status_code
        self.body = body
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        response = requests.Response()
        response.status_code = self.status_code
        response._content = json.dumps(self.body).encode()
        return response


def subscription(status, quantity):
    return {"attributes": {"status": status, "first_subscription_item": {"quantity": quantity}}}


def make_oracle(session):
    client = ProviderHttpClient(
        base_url="https://api.example.test", timeout=1.0, api_key="secret", session=session
    )
    return LemonSqueezySeatQuantity(client)


@pytest.mark.asyncio
class TestLemonSqueezySeatQuantity:
    """Tests for LemonSqueezySeatQuantity."""

    async def test_sums_live_subscriptions(self):
        session = CannedSession(
            body={
                "data": [
                    subscription("active", 3),
                    subscription("on_trial", 1),
                    subscription("cancelled", 10),
                ]
            }
        )

        assert await make_oracle(session).quantity_for_customer("a@example.com") == 4

        method, url, kwargs = session.calls[0]
        assert method == "GET"
        assert url == "https://api.example.test/v1/subscriptions"
        assert kwargs["params"] == {"filter[user_email]": "a@example.com"}
        assert session.headers["Authorization"] == "Bearer secret"

    async def test_no_live_subscription(self):
        session = CannedSession(body={"data": [subscription("expired", 2)]})

        assert await make_oracle(session).quantity_for_customer("a@example.com") is None

    async def test_error_status(self):
        session = CannedSession(status_code=401, body={"errors": []})

        assert await make_oracle(session).quantity_for_customer("a@example.com") is None

    async def test_transport_error(self):
        session = CannedSession(error=requests.exceptions.ConnectionError("down"))

        assert await make_oracle(session).quantity_for_customer("a@example.com") is None


class TestBuildSeatQuantity:
    """Tests for build_seat_quantity."""

    @override_settings(LEMONSQUEEZY_API_KEY="")
    def test_without_api_key(self):
        assert isinstance(build_seat_quantity(), NullSeatQuantity)

    @override_settings(LEMONSQUEEZY_API_KEY="key", LEMONSQUEEZY_API_URL="https://api.example.test")
    def test_with_api_key(self):
        oracle = build_seat_quantity()

        assert isinstance(oracle, LemonSqueezySeatQuantity)
        assert oracle.client.session.headers["Authorization"] == "Bearer key"
