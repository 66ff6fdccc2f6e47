"""
RemoveSeatHandler.

Administrative deletion of a seat. The seat's license key stays consumed.
"""

import logging
from typing import Optional

from accounts.application.commands.remove_seat import RemoveSeatCommand
from accounts.application.dto.account_dto import RemoveSeatResponseDTO
from accounts.domain.events import SeatRemoved, lock_change
from accounts.domain.services import SeatAllocator
from accounts.ports.account_repository import AccountRepository
from core.domain.events import EventBus
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus as default_event_bus
from licenses.domain.license_key import mask_license_key

logger = logging.getLogger(__name__)


class RemoveSeatHandler:
    """Handler for RemoveSeatCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize handler with repository."""
        self.account_repository = account_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: RemoveSeatCommand) -> RemoveSeatResponseDTO:
        """
        Handle remove seat command.

        Raises:
            EmailMissingError: If email is missing or invalid
            SeatNotFoundError: If the seat is not in the account
        """
        email = Email.normalize(command.email)

        def operation(account):
            updated, seat = SeatAllocator.remove_seat(account, command.seat_id)
            return updated, (account, updated, seat)

        before, after, seat = await self.account_repository.update(email, operation)

        await self.event_bus.publish(
            SeatRemoved(
                aggregate_id=email.value,
                seat_id=seat.id,
                source_key=mask_license_key(seat.source_key) if seat.source_key else None,
            )
        )
        change = lock_change(before, after)
        if change:
            await self.event_bus.publish(change)

        logger.warning(
            "Seat removed",
            extra={
                "email": email.value,
                "seat_id": str(seat.id),
                "locked": after.locked,
            },
        )
        return RemoveSeatResponseDTO(
            seat_id=seat.id,
            total_seats=after.total_seats,
            used_seats=after.used_seats,
        )
