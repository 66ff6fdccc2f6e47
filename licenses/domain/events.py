"""
License domain events.
"""
import uuid
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class SeatRedeemed(DomainEvent):
    """Event raised when a license key is exchanged for a new seat."""

    seat_id: uuid.UUID
    license_key: str
    total_seats: int
