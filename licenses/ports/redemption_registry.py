"""
Global redemption registry port (interface).

The registry is written only by the account store, inside the same
transaction that records the account-local redemption. This port is the
read side used for fast rejection before any network call.
"""
from abc import ABC, abstractmethod
from typing import Optional

from accounts.domain.account import RedemptionRecord


class RedemptionRegistry(ABC):
    """Read access to the cross-account license key index."""

    @abstractmethod
    async def find(self, license_key: str) -> Optional[RedemptionRecord]:
        """
        Look up a normalized license key.

        Args:
            license_key: Normalized license key

        Returns:
            RedemptionRecord if the key was redeemed anywhere, else None
        """
        pass
