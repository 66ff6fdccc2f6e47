"""
Account repository port (interface).

This defines the contract for account persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple, TypeVar

from accounts.domain.account import Account
from core.domain.value_objects import Email

T = TypeVar("T")

AccountOperation = Callable[[Account], Tuple[Account, T]]


class AccountRepository(ABC):
    """
    Abstract repository for Account aggregates.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[Account]:
        """
        Find an account by email.

        Args:
            email: Normalized account email

        Returns:
            Account aggregate or None if the account was never written
        """
        pass

    @abstractmethod
    async def update(self, email: Email, operation: AccountOperation) -> T:
        """
        Run a read-modify-write transaction on one account.

        The account is loaded (or created empty) under a per-account
        lock, ``operation`` returns the updated aggregate plus a result,
        and the aggregate is persisted before the lock is released. New
        entries in ``redeemed_keys`` are written to the global redemption
        registry in the same transaction. If ``operation`` returns the
        very same aggregate it received, nothing is written.

        Args:
            email: Normalized account email
            operation: Pure function ``account -> (account, result)``

        Returns:
            The result produced by ``operation``

        Raises:
            KeyAlreadyRedeemedError: If a new redeemed key is already in
                the global registry
            TransientStoreError: If the store fails; nothing was applied
            DomainException: Whatever ``operation`` raises; nothing was applied
        """
        pass
