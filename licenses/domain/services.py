"""
License domain services.
"""

from datetime import datetime
from typing import Tuple

from accounts.domain.account import Account, RedemptionRecord, Seat
from core.domain.exceptions import (
    AccountLockedError,
    KeyAlreadyRedeemedInAccountError,
)


class LicenseKeyRedeemer:
    """Domain service exchanging a license key for one new seat."""

    @staticmethod
    def check_account(account: Account, license_key: str) -> None:
        """
        Run the account-level redemption preconditions.

        Raises:
            AccountLockedError: If the account is locked
            KeyAlreadyRedeemedInAccountError: If the key is in the local registry
        """
        if account.locked:
            raise AccountLockedError()
        if account.has_redeemed(license_key):
            raise KeyAlreadyRedeemedInAccountError()

    @staticmethod
    def redeem(account: Account, license_key: str, redeemed_at: datetime) -> Tuple[Account, Seat]:
        """
        Append a new free seat and record the redemption locally.

        The global registry entry is written by the account store from the
        new ``redeemed_keys`` entry, in the same transaction.

        Args:
            account: Account aggregate
            license_key: Normalized license key
            redeemed_at: Redemption timestamp shared by both registries

        Returns:
            Tuple of (updated account, new seat)
        """
        LicenseKeyRedeemer.check_account(account, license_key)

        seat = Seat.create(source_key=license_key, created_at=redeemed_at)
        record = RedemptionRecord(
            redeemed_at=redeemed_at,
            redeemed_by_email=account.email.value,
        )
        updated = account.record_redemption(license_key, record).add_seat(seat)
        return updated, seat
