"""
In-process implementation of RedemptionRegistry port.

Used by the in-memory account store and by unit tests.
"""
from typing import Dict, Mapping, Optional

from accounts.domain.account import RedemptionRecord
from core.domain.exceptions import KeyAlreadyRedeemedError
from licenses.ports.redemption_registry import RedemptionRegistry


class InMemoryRedemptionRegistry(RedemptionRegistry):
    """Dictionary-backed global registry."""

    def __init__(self):
        self._records: Dict[str, RedemptionRecord] = {}

    async def find(self, license_key: str) -> Optional[RedemptionRecord]:
        return self._records.get(license_key)

    def claim_all(self, records: Mapping[str, RedemptionRecord]) -> None:
        """
        Insert every record or none of them.

        Runs without awaiting, so no other coroutine can interleave
        between the check and the insert.

        Raises:
            KeyAlreadyRedeemedError: If any key is already present
        """
        if any(key in self._records for key in records):
            raise KeyAlreadyRedeemedError()
        self._records.update(records)

    def __len__(self) -> int:
        return len(self._records)
