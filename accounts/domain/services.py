"""
Account domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

import uuid
from typing import Optional, Tuple

from accounts.domain.account import Account, Seat
from core.domain.exceptions import (
    AccountLockedError,
    DeviceIdMissingError,
    NoFreeSeatError,
    SeatNotFoundError,
)


class SeatAllocator:
    """Domain service binding seats to devices."""

    @staticmethod
    def assign(
        account: Account,
        device_id: str,
        device_name: Optional[str] = None,
    ) -> Tuple[Account, Seat]:
        """
        Bind a free seat to a device.

        Assigning a device that already holds a seat returns that seat
        unchanged, so client retries are safe.

        Args:
            account: Account aggregate
            device_id: Device (model) identifier
            device_name: Optional display name

        Returns:
            Tuple of (updated account, assigned seat)

        Raises:
            DeviceIdMissingError: If device_id is empty
            AccountLockedError: If the account is locked
            NoFreeSeatError: If no seat is assignable
        """
        if not device_id:
            raise DeviceIdMissingError()
        if account.locked:
            raise AccountLockedError()

        existing = account.seat_for_device(device_id)
        if existing:
            return account, existing

        free = account.first_assignable_seat()
        if free is None:
            raise NoFreeSeatError()

        seat = free.assign(device_id, device_name)
        return account.replace_seat(seat), seat

    @staticmethod
    def release(account: Account, device_id: str) -> Tuple[Account, Optional[Seat]]:
        """
        Clear the binding of a device. Not gated by the account lock.

        Returns:
            Tuple of (updated account, released seat or None if already free)
        """
        if not device_id:
            raise DeviceIdMissingError()

        seat = account.seat_for_device(device_id)
        if seat is None:
            return account, None
        return account.replace_seat(seat.release()), seat

    @staticmethod
    def remove_seat(account: Account, seat_id: uuid.UUID) -> Tuple[Account, Seat]:
        """
        Delete a seat. Its license key stays consumed in both registries.

        Raises:
            SeatNotFoundError: If the seat does not belong to the account
        """
        seat = account.find_seat(seat_id)
        if seat is None:
            raise SeatNotFoundError()
        return account.remove_seat(seat_id), seat
