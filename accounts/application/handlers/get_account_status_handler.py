"""
GetAccountStatusHandler.

Handler for reading account status. Unknown emails read as an empty,
unlocked account.
"""

from accounts.application.dto.account_dto import AccountStatusDTO
from accounts.application.queries.get_account_status import GetAccountStatusQuery
from accounts.domain.account import Account
from accounts.ports.account_repository import AccountRepository
from core.domain.value_objects import Email


class GetAccountStatusHandler:
    """Handler for GetAccountStatusQuery."""

    def __init__(self, account_repository: AccountRepository):
        """Initialize handler with repository."""
        self.account_repository = account_repository

    async def handle(self, query: GetAccountStatusQuery) -> AccountStatusDTO:
        """
        Handle get account status query.

        Args:
            query: GetAccountStatusQuery

        Returns:
            AccountStatusDTO

        Raises:
            EmailMissingError: If email is missing or invalid
        """
        email = Email.normalize(query.email)
        account = await self.account_repository.find_by_email(email)
        if account is None:
            account = Account.create(email)
        return AccountStatusDTO.from_account(account)
