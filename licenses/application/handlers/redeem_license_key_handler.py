"""
RedeemLicenseKeyHandler.

Handler for the Redemption Engine: one license key becomes exactly one
seat, at most once across all accounts.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from accounts.domain.events import lock_change
from accounts.ports.account_repository import AccountRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    AccountLockedError,
    InvalidLicenseKeyError,
    KeyAlreadyRedeemedError,
    KeyAlreadyRedeemedInAccountError,
    KeyLookupUnavailableError,
)
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus as default_event_bus
from licenses.application.commands.redeem_license_key import RedeemLicenseKeyCommand
from licenses.application.dto.redemption_dto import RedeemLicenseKeyResponseDTO
from licenses.domain.events import SeatRedeemed
from licenses.domain.license_key import mask_license_key, normalize_license_key
from licenses.domain.services import LicenseKeyRedeemer
from licenses.ports.key_lookup import KeyLookupOracle, NullKeyLookup
from licenses.ports.redemption_registry import RedemptionRegistry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RedeemLicenseKeyHandler:
    """Handler for RedeemLicenseKeyCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        redemption_registry: RedemptionRegistry,
        key_lookup: Optional[KeyLookupOracle] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize handler with repositories and the key-lookup oracle."""
        self.account_repository = account_repository
        self.redemption_registry = redemption_registry
        self.key_lookup = key_lookup or NullKeyLookup()
        self.event_bus = event_bus or default_event_bus
        self.clock = clock

    async def _check_preconditions(self, email: Email, license_key: str) -> None:
        """
        Fail fast, in order, on the current snapshot.

        Runs outside the account transaction so that the network lookup
        never happens while the account is locked for writing. The same
        checks run again inside the transaction.
        """
        account = await self.account_repository.find_by_email(email)
        if account is not None and account.locked:
            raise AccountLockedError()
        if await self.redemption_registry.find(license_key) is not None:
            raise KeyAlreadyRedeemedError()
        if account is not None and account.has_redeemed(license_key):
            raise KeyAlreadyRedeemedInAccountError()

    async def _validate_with_provider(self, entered_key: str) -> None:
        try:
            found = await self.key_lookup.find_key(entered_key)
        except KeyLookupUnavailableError as exc:
            logger.warning(
                "Key lookup unavailable, rejecting redemption",
                extra={"license_key": mask_license_key(entered_key)},
            )
            raise InvalidLicenseKeyError() from exc
        if not found:
            raise InvalidLicenseKeyError()

    async def handle(self, command: RedeemLicenseKeyCommand) -> RedeemLicenseKeyResponseDTO:
        """
        Handle redeem license key command.

        Args:
            command: RedeemLicenseKeyCommand

        Returns:
            RedeemLicenseKeyResponseDTO with the new seat and totals

        Raises:
            EmailMissingError: If email is missing or invalid
            LicenseKeyMissingError: If the key is empty
            AccountLockedError: If the account is locked
            KeyAlreadyRedeemedError: If any account already redeemed the key
            KeyAlreadyRedeemedInAccountError: If this account already did
            InvalidLicenseKeyError: If the provider does not know the key,
                or could not answer
        """
        email = Email.normalize(command.email)
        license_key = normalize_license_key(command.license_key)

        await self._check_preconditions(email, license_key)
        # The provider may compare keys case-sensitively.
        await self._validate_with_provider(str(command.license_key).strip())

        redeemed_at = self.clock()

        def operation(account):
            updated, seat = LicenseKeyRedeemer.redeem(account, license_key, redeemed_at)
            return updated, (account, updated, seat)

        try:
            before, after, seat = await self.account_repository.update(email, operation)
        except KeyAlreadyRedeemedError:
            logger.info(
                "Concurrent redemption lost the race",
                extra={"email": email.value, "license_key": mask_license_key(license_key)},
            )
            raise

        await self.event_bus.publish(
            SeatRedeemed(
                aggregate_id=email.value,
                seat_id=seat.id,
                license_key=mask_license_key(license_key),
                total_seats=after.total_seats,
            )
        )
        change = lock_change(before, after)
        if change:
            await self.event_bus.publish(change)

        logger.info(
            "License key redeemed",
            extra={
                "email": email.value,
                "seat_id": str(seat.id),
                "license_key": mask_license_key(license_key),
                "total_seats": after.total_seats,
            },
        )

        return RedeemLicenseKeyResponseDTO(
            seat_id=seat.id,
            total_seats=after.total_seats,
            used_seats=after.used_seats,
        )
