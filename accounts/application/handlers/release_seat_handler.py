"""
ReleaseSeatHandler.

Handler for clearing a device binding. Always succeeds for a well-formed
request, even on a locked account.
"""

import logging
from typing import Optional

from accounts.application.commands.release_seat import ReleaseSeatCommand
from accounts.application.dto.account_dto import ReleaseSeatResponseDTO
from accounts.domain.events import SeatReleased
from accounts.domain.services import SeatAllocator
from accounts.ports.account_repository import AccountRepository
from core.domain.events import EventBus
from core.domain.exceptions import DeviceIdMissingError
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus as default_event_bus

logger = logging.getLogger(__name__)


class ReleaseSeatHandler:
    """Handler for ReleaseSeatCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize handler with repository."""
        self.account_repository = account_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: ReleaseSeatCommand) -> ReleaseSeatResponseDTO:
        """
        Handle release seat command.

        Args:
            command: ReleaseSeatCommand

        Returns:
            ReleaseSeatResponseDTO; ``released`` is False when the device
            held no seat
        """
        email = Email.normalize(command.email)
        device_id = (command.device_id or "").strip()
        if not device_id:
            raise DeviceIdMissingError()

        seat = await self.account_repository.update(
            email, lambda account: SeatAllocator.release(account, device_id)
        )

        if seat is None:
            logger.info(
                "Release of unbound device",
                extra={"email": email.value, "device_id": device_id},
            )
            return ReleaseSeatResponseDTO(released=False, message="already free")

        await self.event_bus.publish(
            SeatReleased(aggregate_id=email.value, seat_id=seat.id, device_id=device_id)
        )
        logger.info(
            "Seat released",
            extra={"email": email.value, "seat_id": str(seat.id), "device_id": device_id},
        )
        return ReleaseSeatResponseDTO(released=True, seat_id=seat.id)
