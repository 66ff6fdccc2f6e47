"""
Payment provider events.

Parsing and field extraction for Lemon Squeezy webhook envelopes
(``{"meta": {...}, "data": {"id": ..., "attributes": {...}}}``) and the
classification of event names. Nothing here touches account state.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from core.domain.exceptions import LicenseKeyMissingError
from licenses.domain.license_key import normalize_license_key


class EventCategory(str, Enum):
    """What a provider event means for account state."""

    SUBSCRIPTION_BAD = "subscription_bad"
    SUBSCRIPTION_GOOD = "subscription_good"
    KEY_REVOKING = "key_revoking"
    KEY_RESTORING = "key_restoring"
    ORDER_CREATED = "order_created"
    NONE = "none"


SUBSCRIPTION_BAD_EVENTS = frozenset(
    {
        "subscription_payment_failed",
        "subscription_expired",
        "subscription_cancelled",
        "subscription_paused",
        "subscription_past_due",
    }
)

SUBSCRIPTION_GOOD_EVENTS = frozenset(
    {
        "subscription_payment_success",
        "subscription_resumed",
        "subscription_updated",
        "subscription_renewed",
        "subscription_created",
    }
)

KEY_REVOKING_EVENTS = frozenset(
    {
        "license_key_deleted",
        "license_key_disabled",
        "order_refunded",
    }
)

KEY_UPDATED_EVENT = "license_key_updated"
ORDER_CREATED_EVENT = "order_created"

# Revocations that only an explicit re-redemption can undo.
TERMINAL_REVOCATIONS = frozenset({"license_key_deleted", "order_refunded"})

UNLOCKING_STATUSES = frozenset({"active", "on_trial"})
KEY_ACTIVE_STATUSES = frozenset({"active", "enabled"})
KEY_INACTIVE_STATUSES = frozenset({"disabled", "expired"})

EMAIL_ATTRIBUTES: Tuple[str, ...] = ("user_email", "customer_email", "email")
LICENSE_KEY_ATTRIBUTES: Tuple[str, ...] = ("key", "license_key", "licenseKey")


def parse_payload(raw_body: bytes) -> Dict[str, Any]:
    """
    Decode a webhook body.

    Malformed JSON, or JSON that is not an object, reads as an empty
    payload so every field is simply absent.
    """
    try:
        payload = json.loads(raw_body)
    except (TypeError, ValueError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _attributes(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    return _mapping(_mapping(payload.get("data")).get("attributes"))


def _custom_data(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    return _mapping(_mapping(payload.get("meta")).get("custom_data"))


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def first_valid_email(candidates: Sequence[Any]) -> Optional[str]:
    """First candidate that contains '@', trimmed and lower-cased."""
    for candidate in candidates:
        text = _text(candidate)
        if text and "@" in text:
            return text.lower()
    return None


def extract_email(payload: Mapping[str, Any]) -> Optional[str]:
    """
    Customer email, by priority: ``user_email``, ``customer_email``,
    ``email`` attributes, then ``meta.custom_data.email``.
    """
    attributes = _attributes(payload)
    candidates = [attributes.get(name) for name in EMAIL_ATTRIBUTES]
    candidates.append(_custom_data(payload).get("email"))
    return first_valid_email(candidates)


def extract_license_key(payload: Mapping[str, Any]) -> Optional[str]:
    """
    Normalized license key, by priority: ``key``, ``license_key``,
    ``licenseKey`` attributes, then ``meta.custom_data.license_key``.
    """
    attributes = _attributes(payload)
    candidates = [attributes.get(name) for name in LICENSE_KEY_ATTRIBUTES]
    candidates.append(_custom_data(payload).get("license_key"))
    for candidate in candidates:
        text = _text(candidate)
        if text is None:
            continue
        try:
            return normalize_license_key(text)
        except LicenseKeyMissingError:
            continue
    return None


def extract_event_name(payload: Mapping[str, Any], header_event_name: Optional[str] = None) -> str:
    meta = _mapping(payload.get("meta"))
    return _text(meta.get("event_name")) or _text(header_event_name) or "unknown"


def extract_event_id(payload: Mapping[str, Any]) -> Optional[str]:
    meta = _mapping(payload.get("meta"))
    return _text(meta.get("event_id")) or _text(meta.get("webhook_id"))


def extract_status(payload: Mapping[str, Any]) -> Optional[str]:
    status = _text(_attributes(payload).get("status"))
    return status.lower() if status else None


def extract_order_id(payload: Mapping[str, Any]) -> Optional[str]:
    return _text(_mapping(payload.get("data")).get("id"))


def extract_quantity(payload: Mapping[str, Any]) -> Optional[int]:
    """``first_order_item.quantity`` as a positive int, else None."""
    item = _mapping(_attributes(payload).get("first_order_item"))
    try:
        quantity = int(item.get("quantity"))
    except (TypeError, ValueError):
        return None
    return quantity if quantity > 0 else None


@dataclass(frozen=True)
class ProviderEvent:
    """A verified provider event with its relevant fields extracted."""

    event_name: str
    event_id: Optional[str] = None
    customer_email: Optional[str] = None
    license_key: Optional[str] = None
    status: Optional[str] = None
    order_id: Optional[str] = None
    quantity: Optional[int] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], header_event_name: Optional[str] = None
    ) -> "ProviderEvent":
        return cls(
            event_name=extract_event_name(payload, header_event_name),
            event_id=extract_event_id(payload),
            customer_email=extract_email(payload),
            license_key=extract_license_key(payload),
            status=extract_status(payload),
            order_id=extract_order_id(payload),
            quantity=extract_quantity(payload),
            attributes=dict(_attributes(payload)),
        )

    @property
    def category(self) -> EventCategory:
        return classify(self.event_name, self.status)

    @property
    def carries_unlock_intent(self) -> bool:
        """Good subscription events unlock only for an absent, active or trial status."""
        return self.category is EventCategory.SUBSCRIPTION_GOOD and (
            self.status is None or self.status in UNLOCKING_STATUSES
        )

    @property
    def order_marker(self) -> Optional[str]:
        return f"order:{self.order_id}" if self.order_id else None

    @property
    def revocation_reason(self) -> str:
        """Reason stored on revoked seats; key updates name the new status."""
        if self.event_name == KEY_UPDATED_EVENT and self.status:
            return f"license_key_{self.status}"
        return self.event_name


def classify(event_name: str, status: Optional[str] = None) -> EventCategory:
    """
    Classify an event name.

    ``license_key_updated`` depends on the key status it carries: active
    or enabled restores, disabled or expired revokes, anything else is
    ignored.
    """
    if event_name in SUBSCRIPTION_BAD_EVENTS:
        return EventCategory.SUBSCRIPTION_BAD
    if event_name in SUBSCRIPTION_GOOD_EVENTS:
        return EventCategory.SUBSCRIPTION_GOOD
    if event_name in KEY_REVOKING_EVENTS:
        return EventCategory.KEY_REVOKING
    if event_name == KEY_UPDATED_EVENT:
        if status in KEY_ACTIVE_STATUSES:
            return EventCategory.KEY_RESTORING
        if status in KEY_INACTIVE_STATUSES:
            return EventCategory.KEY_REVOKING
        return EventCategory.NONE
    if event_name == ORDER_CREATED_EVENT:
        return EventCategory.ORDER_CREATED
    return EventCategory.NONE
