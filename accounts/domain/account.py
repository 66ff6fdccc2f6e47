"""
Account aggregate.

An Account is the billing-identity-scoped container of seats, redeemed
license keys and lock state. Entities here are immutable: every change
returns a new instance, so a failed operation never leaves a half-applied
aggregate behind.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from accounts.domain.lock_policy import compute_lock
from core.domain.value_objects import Email


@dataclass(frozen=True)
class RedemptionRecord:
    """Who redeemed a license key and when."""

    redeemed_at: datetime
    redeemed_by_email: str


@dataclass(frozen=True)
class Seat:
    """
    One consumable unit of license entitlement.

    A seat is free when it has no device binding. ``revoked`` marks a
    permanent withdrawal, ``payment_active=False`` an unpaid or disputed
    seat.
    """

    id: uuid.UUID
    assigned_device_id: Optional[str] = None
    assigned_device_name: Optional[str] = None
    source_key: Optional[str] = None
    payment_active: bool = True
    revoked: bool = False
    revocation_reason: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        """Validate seat entity."""
        if not self.id:
            raise ValueError("Seat ID is required")
        if (self.assigned_device_id is None) != (self.assigned_device_name is None):
            raise ValueError("Device id and device name must be set together")

    @classmethod
    def create(
        cls,
        source_key: Optional[str] = None,
        seat_id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
    ) -> "Seat":
        """
        Create a new free, paid, unrevoked seat.

        Args:
            source_key: Normalized license key that produced the seat
            seat_id: Optional UUID (generated if not provided)
            created_at: Optional creation time

        Returns:
            Seat entity instance
        """
        return cls(
            id=seat_id or uuid.uuid4(),
            source_key=source_key,
            created_at=created_at or datetime.now(timezone.utc),
        )

    @property
    def is_free(self) -> bool:
        return self.assigned_device_id is None

    @property
    def is_assignable(self) -> bool:
        """Free, not revoked and not unpaid."""
        return self.is_free and not self.revoked and self.payment_active

    def assign(self, device_id: str, device_name: Optional[str] = None) -> "Seat":
        return replace(
            self,
            assigned_device_id=device_id,
            assigned_device_name=device_name or device_id,
        )

    def release(self) -> "Seat":
        if self.is_free:
            return self
        return replace(self, assigned_device_id=None, assigned_device_name=None)

    def revoke(self, reason: str) -> "Seat":
        """Withdraw the seat and mark it unpaid."""
        return replace(self, payment_active=False, revoked=True, revocation_reason=reason)

    def restore(self) -> "Seat":
        """Mark the seat paid and no longer revoked."""
        return replace(self, payment_active=True, revoked=False, revocation_reason=None)


@dataclass(frozen=True)
class Account:
    """
    Account aggregate root, keyed by lower-cased email.

    ``total_seats`` and ``used_seats`` are always derived from ``seats``.
    Every method that touches seats re-runs the lock policy before
    returning, so ``locked``/``lock_reason`` never drift from seat state.
    """

    email: Email
    seats: Tuple[Seat, ...] = ()
    redeemed_keys: Mapping[str, RedemptionRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    locked: bool = False
    lock_reason: Optional[str] = None
    processed_event_ids: FrozenSet[str] = frozenset()

    def __post_init__(self):
        """Validate account aggregate."""
        if not isinstance(self.email, Email):
            raise ValueError("Account email must be an Email value object")
        seat_ids = [seat.id for seat in self.seats]
        if len(seat_ids) != len(set(seat_ids)):
            raise ValueError("Seat ids must be unique within an account")
        if not isinstance(self.redeemed_keys, MappingProxyType):
            object.__setattr__(self, "redeemed_keys", MappingProxyType(dict(self.redeemed_keys)))

    @classmethod
    def create(cls, email: Email) -> "Account":
        """Create an empty, unlocked account."""
        return cls(email=email)

    @property
    def total_seats(self) -> int:
        return len(self.seats)

    @property
    def used_seats(self) -> int:
        return sum(1 for seat in self.seats if not seat.is_free)

    # Lookups

    def find_seat(self, seat_id: uuid.UUID) -> Optional[Seat]:
        return next((seat for seat in self.seats if seat.id == seat_id), None)

    def seat_for_device(self, device_id: str) -> Optional[Seat]:
        return next(
            (seat for seat in self.seats if seat.assigned_device_id == device_id),
            None,
        )

    def first_assignable_seat(self) -> Optional[Seat]:
        """First seat in creation order that may be bound to a device."""
        return next((seat for seat in self.seats if seat.is_assignable), None)

    def seats_for_key(self, source_key: str) -> Tuple[Seat, ...]:
        return tuple(seat for seat in self.seats if seat.source_key == source_key)

    def has_redeemed(self, license_key: str) -> bool:
        return license_key in self.redeemed_keys

    def has_processed(self, event_id: Optional[str]) -> bool:
        return bool(event_id) and event_id in self.processed_event_ids

    # Mutations

    def add_seat(self, seat: Seat) -> "Account":
        return self._with_seats(self.seats + (seat,))

    def replace_seat(self, seat: Seat) -> "Account":
        if self.find_seat(seat.id) is None:
            raise ValueError(f"Seat {seat.id} does not belong to {self.email}")
        return self._with_seats(tuple(seat if s.id == seat.id else s for s in self.seats))

    def remove_seat(self, seat_id: uuid.UUID) -> "Account":
        return self._with_seats(tuple(s for s in self.seats if s.id != seat_id))

    def record_redemption(self, license_key: str, record: RedemptionRecord) -> "Account":
        redeemed = dict(self.redeemed_keys)
        redeemed[license_key] = record
        return replace(self, redeemed_keys=MappingProxyType(redeemed))

    def mark_processed(self, event_id: Optional[str]) -> "Account":
        if not event_id or event_id in self.processed_event_ids:
            return self
        return replace(self, processed_event_ids=self.processed_event_ids | {event_id})

    def force_lock(self, reason: str) -> "Account":
        """Lock for an explicit, externally decided reason."""
        return replace(self, locked=True, lock_reason=reason)

    def clear_lock_reason(self) -> "Account":
        """Drop the explicit reason so the lock policy may unlock."""
        if self.lock_reason is None:
            return self
        return replace(self, lock_reason=None)

    def apply_lock_policy(self) -> "Account":
        locked, reason = compute_lock(self)
        if locked == self.locked and reason == self.lock_reason:
            return self
        return replace(self, locked=locked, lock_reason=reason)

    def _with_seats(self, seats: Tuple[Seat, ...]) -> "Account":
        return replace(self, seats=seats).apply_lock_policy()
