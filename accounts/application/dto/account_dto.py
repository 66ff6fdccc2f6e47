"""
Account DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from accounts.domain.account import Account, Seat


@dataclass
class SeatDTO:
    """DTO for one seat in a status response."""

    id: uuid.UUID
    assigned_device_id: Optional[str]
    assigned_device_name: Optional[str]
    payment_active: bool
    revoked: bool

    @classmethod
    def from_seat(cls, seat: Seat) -> "SeatDTO":
        return cls(
            id=seat.id,
            assigned_device_id=seat.assigned_device_id,
            assigned_device_name=seat.assigned_device_name,
            payment_active=seat.payment_active,
            revoked=seat.revoked,
        )


@dataclass
class AccountStatusDTO:
    """DTO for account status response."""

    email: str
    total_seats: int
    used_seats: int
    locked: bool
    lock_reason: Optional[str]
    seats: List[SeatDTO] = field(default_factory=list)

    @classmethod
    def from_account(cls, account: Account) -> "AccountStatusDTO":
        return cls(
            email=account.email.value,
            total_seats=account.total_seats,
            used_seats=account.used_seats,
            locked=account.locked,
            lock_reason=account.lock_reason,
            seats=[SeatDTO.from_seat(seat) for seat in account.seats],
        )


@dataclass
class AssignSeatResponseDTO:
    """DTO for assign seat response."""

    seat_id: uuid.UUID
    total_seats: int
    used_seats: int
    already_assigned: bool = False


@dataclass
class ReleaseSeatResponseDTO:
    """DTO for release seat response."""

    released: bool
    seat_id: Optional[uuid.UUID] = None
    message: str = "released"


@dataclass
class RemoveSeatResponseDTO:
    """DTO for remove seat response."""

    seat_id: uuid.UUID
    total_seats: int
    used_seats: int
