"""
Account domain events.

Domain events represent something that happened to an account's seats
or lock state.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class SeatAssigned(DomainEvent):
    """Event raised when a seat is bound to a device."""

    seat_id: uuid.UUID
    device_id: str


@dataclass(frozen=True, kw_only=True)
class SeatReleased(DomainEvent):
    """Event raised when a device binding is cleared."""

    seat_id: uuid.UUID
    device_id: str


@dataclass(frozen=True, kw_only=True)
class SeatRemoved(DomainEvent):
    """Event raised when an administrator deletes a seat."""

    seat_id: uuid.UUID
    source_key: Optional[str] = None  # masked


@dataclass(frozen=True, kw_only=True)
class AccountLockChanged(DomainEvent):
    """Event raised when an account's lock state or reason changes."""

    locked: bool
    reason: Optional[str] = None


def lock_change(before, after) -> Optional[AccountLockChanged]:
    """Return an AccountLockChanged event if the lock state differs, else None."""
    if (before.locked, before.lock_reason) == (after.locked, after.lock_reason):
        return None
    return AccountLockChanged(
        aggregate_id=after.email.value,
        locked=after.locked,
        reason=after.lock_reason,
    )
