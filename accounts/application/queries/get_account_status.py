"""
GetAccountStatusQuery.

Query to read the seats and lock state of an account.
"""
from dataclasses import dataclass


@dataclass
class GetAccountStatusQuery:
    """Query to get account status."""

    email: str
