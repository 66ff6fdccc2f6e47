"""
Unit tests for the lock policy.
"""

from accounts.domain.account import Seat
from accounts.domain.lock_policy import SEAT_UNPAID, compute_lock
from conftest import make_account


class TestComputeLock:
    """Tests for compute_lock."""

    def test_empty_account_is_unlocked(self):
        """An account without seats and without a reason is unlocked."""
        assert compute_lock(make_account()) == (False, None)

    def test_unpaid_seat_locks(self):
        """Any unpaid seat locks with seat_unpaid."""
        account = make_account(seats=[Seat.create(), Seat.create().revoke("order_refunded")])

        assert compute_lock(account) == (True, SEAT_UNPAID)

    def test_unpaid_seat_overrides_explicit_reason(self):
        """Unpaid seats win over a subscription reason."""
        account = make_account(
            seats=[Seat.create().revoke("license_key_disabled")],
            locked=True,
            lock_reason="subscription_expired",
        )

        assert compute_lock(account) == (True, SEAT_UNPAID)

    def test_seat_unpaid_lock_lifts_when_all_paid(self):
        """A lock caused by unpaid seats is lifted once every seat is paid."""
        account = make_account(seats=[Seat.create()], locked=True, lock_reason=SEAT_UNPAID)

        assert compute_lock(account) == (False, None)

    def test_lock_without_reason_lifts(self):
        """A lock without a reason does not survive paid seats."""
        account = make_account(seats=[Seat.create()], locked=True, lock_reason=None)

        assert compute_lock(account) == (False, None)

    def test_explicit_reason_is_sticky(self):
        """A subscription lock stays until its reason is cleared."""
        account = make_account(
            seats=[Seat.create()],
            locked=True,
            lock_reason="subscription_payment_failed",
        )

        assert compute_lock(account) == (True, "subscription_payment_failed")

    def test_unlocked_account_never_keeps_a_reason(self):
        """An unlocked account reports no reason."""
        account = make_account(seats=[Seat.create()], locked=False, lock_reason="stale")

        assert compute_lock(account) == (False, None)
