"""
Lock policy.

Pure function deciding whether an account is locked, from its seats'
payment state and the last explicit lock decision.
"""

from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from accounts.domain.account import Account

SEAT_UNPAID = "seat_unpaid"


def compute_lock(account: "Account") -> Tuple[bool, Optional[str]]:
    """
    Compute the lock state of an account.

    - Any unpaid seat locks the account with reason ``seat_unpaid``.
    - A lock caused by unpaid seats, or without a reason, is lifted once
      every seat is paid.
    - Any other explicit reason is sticky.

    Args:
        account: Account aggregate

    Returns:
        Tuple of (locked, reason); reason is None when unlocked
    """
    if any(not seat.payment_active for seat in account.seats):
        return True, SEAT_UNPAID

    if account.lock_reason in (None, SEAT_UNPAID):
        return False, None

    if account.locked:
        return True, account.lock_reason
    return False, None
