"""
Pytest configuration and shared fixtures.
"""

import json
from datetime import datetime, timezone

import pytest

from accounts.domain.account import Account, RedemptionRecord, Seat
from accounts.infrastructure.repositories.django_account_repository import (
    DjangoAccountRepository,
)
from accounts.infrastructure.repositories.in_memory_account_repository import (
    InMemoryAccountRepository,
)
from core.domain.value_objects import Email
from core.infrastructure.events import InMemoryEventBus
from core.infrastructure.webhooks import WebhookSignatureVerifier
from licenses.infrastructure.repositories.django_redemption_registry import (
    DjangoRedemptionRegistry,
)
from licenses.infrastructure.repositories.in_memory_redemption_registry import (
    InMemoryRedemptionRegistry,
)
from licenses.ports.key_lookup import KeyLookupOracle

SIGNING_SECRET = "test-signing-secret"
ADMIN_KEY = "test-admin-key"


class RecordingEventBus(InMemoryEventBus):
    """Event bus that keeps every published event."""

    def __init__(self):
        super().__init__()
        self.published = []

    async def publish(self, event):
        self.published.append(event)
        await super().publish(event)

    def of_type(self, event_type):
        return [event for event in self.published if isinstance(event, event_type)]


class StubKeyLookup(KeyLookupOracle):
    """Key lookup answering from a fixed set, or raising a fixed error."""

    def __init__(self, known=(), error=None):
        self.known = set(known)
        self.error = error
        self.calls = []

    async def find_key(self, license_key):
        self.calls.append(license_key)
        if self.error is not None:
            raise self.error
        return license_key in self.known


def make_account(email="user@example.com", seats=(), locked=False, lock_reason=None, **kwargs):
    """Build an Account aggregate without going through a repository."""
    return Account(
        email=Email(email),
        seats=tuple(seats),
        locked=locked,
        lock_reason=lock_reason,
        **kwargs,
    )


def signed_body(payload, secret=SIGNING_SECRET):
    """Serialize a webhook payload and sign the exact bytes."""
    raw_body = json.dumps(payload).encode()
    return raw_body, WebhookSignatureVerifier.generate_signature(raw_body, secret)


def webhook_payload(event_name, email="user@example.com", event_id=None, data_id="1", **attributes):
    """Lemon Squeezy style webhook envelope."""
    meta = {"event_name": event_name}
    if event_id is not None:
        meta["event_id"] = event_id
    if email is not None:
        attributes.setdefault("user_email", email)
    return {"meta": meta, "data": {"id": data_id, "attributes": attributes}}


@pytest.fixture
def now():
    """Fixed redemption timestamp."""
    return datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def email():
    """Normalized account email."""
    return Email("user@example.com")


@pytest.fixture
def redemption_registry():
    """Fixture for an in-memory global redemption registry."""
    return InMemoryRedemptionRegistry()


@pytest.fixture
def account_repository(redemption_registry):
    """Fixture for an in-memory AccountRepository sharing the registry."""
    return InMemoryAccountRepository(registry=redemption_registry)


@pytest.fixture
def django_account_repository():
    """Fixture for DjangoAccountRepository."""
    return DjangoAccountRepository()


@pytest.fixture
def django_redemption_registry():
    """Fixture for DjangoRedemptionRegistry."""
    return DjangoRedemptionRegistry()


@pytest.fixture
def event_bus():
    """Fixture for an event bus that records what was published."""
    return RecordingEventBus()


@pytest.fixture
def seeded_account(account_repository, email, now):
    """
    Account with two seats from redeemed keys, saved in the in-memory store.

    Returns a coroutine factory so async tests can await the seeding.
    """

    async def seed(seat_count=2, **kwargs):
        seats = [
            Seat.create(source_key=f"key-{index}", created_at=now) for index in range(seat_count)
        ]
        redeemed = {
            seat.source_key: RedemptionRecord(redeemed_at=now, redeemed_by_email=email.value)
            for seat in seats
        }
        account = make_account(email.value, seats=seats, redeemed_keys=redeemed, **kwargs)
        return await account_repository.save(account)

    return seed


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
