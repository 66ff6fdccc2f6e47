"""
In-process implementation of AccountRepository port.

Serializes writers per email with an ``asyncio.Lock``. Used by unit tests
and by single-process deployments without a database.
"""

import asyncio
from typing import Dict, Optional

from accounts.domain.account import Account
from accounts.ports.account_repository import AccountOperation, AccountRepository, T
from core.domain.exceptions import TransientStoreError
from core.domain.value_objects import Email
from licenses.infrastructure.repositories.in_memory_redemption_registry import (
    InMemoryRedemptionRegistry,
)


class InMemoryAccountRepository(AccountRepository):
    """Dictionary-backed account store sharing one global registry."""

    def __init__(self, registry: Optional[InMemoryRedemptionRegistry] = None):
        self.registry = registry if registry is not None else InMemoryRedemptionRegistry()
        self._accounts: Dict[str, Account] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self.fail_writes = False
        self.writes = 0

    def _lock_for(self, email: Email) -> asyncio.Lock:
        return self._locks.setdefault(email.value, asyncio.Lock())

    async def find_by_email(self, email: Email) -> Optional[Account]:
        return self._accounts.get(email.value)

    async def update(self, email: Email, operation: AccountOperation) -> T:
        async with self._lock_for(email):
            current = self._accounts.get(email.value) or Account.create(email)
            # Let other writers run between load and commit so tests can
            # observe that the lock, not luck, keeps them apart.
            await asyncio.sleep(0)
            updated, result = operation(current)
            if updated is current:
                return result
            if self.fail_writes:
                raise TransientStoreError()

            new_keys = {
                key: record
                for key, record in updated.redeemed_keys.items()
                if key not in current.redeemed_keys
            }
            self.registry.claim_all(new_keys)
            self._accounts[email.value] = updated
            self.writes += 1
            return result

    async def save(self, account: Account) -> Account:
        """Seed an account directly, bypassing operations. Test helper."""
        async with self._lock_for(account.email):
            previous = self._accounts.get(account.email.value)
            known = previous.redeemed_keys if previous else {}
            self.registry.claim_all(
                {key: record for key, record in account.redeemed_keys.items() if key not in known}
            )
            self._accounts[account.email.value] = account
            return account
