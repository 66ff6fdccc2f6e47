"""
Key lookup oracle port (interface).

The payment provider can be asked whether a license key exists. When no
provider is configured the null adapter accepts every key.
"""
from abc import ABC, abstractmethod


class KeyLookupOracle(ABC):
    """Answers whether the provider knows a license key."""

    @abstractmethod
    async def find_key(self, license_key: str) -> bool:
        """
        Look up a license key at the provider.

        Args:
            license_key: Normalized license key

        Returns:
            True if found, False if the provider definitely does not know it

        Raises:
            KeyLookupUnavailableError: On timeout, transport error or an
                unexpected response
        """
        pass


class NullKeyLookup(KeyLookupOracle):
    """Offline mode: every key is accepted."""

    async def find_key(self, license_key: str) -> bool:
        return True
