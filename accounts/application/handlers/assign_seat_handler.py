"""
AssignSeatHandler.

Handler for binding a seat to a device.
"""

import logging
from typing import Optional

from accounts.application.commands.assign_seat import AssignSeatCommand
from accounts.application.dto.account_dto import AssignSeatResponseDTO
from accounts.domain.events import SeatAssigned
from accounts.domain.services import SeatAllocator
from accounts.ports.account_repository import AccountRepository
from core.domain.events import EventBus
from core.domain.exceptions import DeviceIdMissingError
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus as default_event_bus

logger = logging.getLogger(__name__)


class AssignSeatHandler:
    """Handler for AssignSeatCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize handler with repository."""
        self.account_repository = account_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: AssignSeatCommand) -> AssignSeatResponseDTO:
        """
        Handle assign seat command.

        Args:
            command: AssignSeatCommand

        Returns:
            AssignSeatResponseDTO with the bound seat

        Raises:
            EmailMissingError: If email is missing or invalid
            DeviceIdMissingError: If device id is missing
            AccountLockedError: If the account is locked
            NoFreeSeatError: If no seat can be assigned
        """
        email = Email.normalize(command.email)
        device_id = (command.device_id or "").strip()
        if not device_id:
            raise DeviceIdMissingError()
        device_name = (command.device_name or "").strip() or None

        def operation(account):
            updated, seat = SeatAllocator.assign(account, device_id, device_name)
            return updated, (updated, seat, updated is account)

        account, seat, already_assigned = await self.account_repository.update(email, operation)

        if not already_assigned:
            await self.event_bus.publish(
                SeatAssigned(aggregate_id=email.value, seat_id=seat.id, device_id=device_id)
            )

        logger.info(
            "Seat assigned",
            extra={
                "email": email.value,
                "seat_id": str(seat.id),
                "device_id": device_id,
                "already_assigned": already_assigned,
            },
        )

        return AssignSeatResponseDTO(
            seat_id=seat.id,
            total_seats=account.total_seats,
            used_seats=account.used_seats,
            already_assigned=already_assigned,
        )
