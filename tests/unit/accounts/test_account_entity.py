"""
Unit tests for Account and Seat entities.
"""

import uuid

import pytest

from accounts.domain.account import Account, Seat
from accounts.domain.lock_policy import SEAT_UNPAID
from conftest import make_account
from core.domain.exceptions import EmailMissingError
from core.domain.value_objects import Email


class TestEmail:
    """Tests for the Email value object."""

    def test_normalize_trims_and_lowercases(self):
        """Emails are keyed case-insensitively."""
        assert Email.normalize("  User@Example.COM ").value == "user@example.com"

    @pytest.mark.parametrize("raw", [None, "", "   ", "no-at-sign"])
    def test_normalize_rejects_missing(self, raw):
        """Empty or '@'-less emails are missing."""
        with pytest.raises(EmailMissingError) as exc_info:
            Email.normalize(raw)
        assert exc_info.value.code == "email_missing"

    def test_constructor_rejects_unnormalized(self):
        """The constructor only accepts normalized values."""
        with pytest.raises(ValueError):
            Email("User@example.com")


class TestSeat:
    """Tests for Seat entity."""

    def test_create_defaults(self):
        """New seats are free, paid and not revoked."""
        seat = Seat.create(source_key="abc")

        assert seat.is_free
        assert seat.is_assignable
        assert seat.payment_active
        assert not seat.revoked
        assert seat.source_key == "abc"

    def test_assign_defaults_name_to_device_id(self):
        """A missing device name falls back to the device id."""
        seat = Seat.create().assign("mac-1")

        assert seat.assigned_device_id == "mac-1"
        assert seat.assigned_device_name == "mac-1"
        assert not seat.is_free

    def test_device_id_and_name_set_together(self):
        """A binding needs both id and name."""
        with pytest.raises(ValueError):
            Seat(id=uuid.uuid4(), assigned_device_id="mac-1")

    def test_release_free_seat_is_identity(self):
        """Releasing a free seat returns the same object."""
        seat = Seat.create()

        assert seat.release() is seat

    def test_revoke_and_restore(self):
        """Revocation marks the seat unpaid; restore undoes it."""
        revoked = Seat.create().revoke("license_key_disabled")

        assert revoked.revoked
        assert not revoked.payment_active
        assert revoked.revocation_reason == "license_key_disabled"
        assert not revoked.is_assignable

        restored = revoked.restore()
        assert restored.payment_active
        assert not restored.revoked
        assert restored.revocation_reason is None

    def test_revoke_keeps_binding(self):
        """A bound seat stays bound when revoked."""
        seat = Seat.create().assign("mac-1", "MacBook").revoke("order_refunded")

        assert seat.assigned_device_id == "mac-1"


class TestAccount:
    """Tests for Account aggregate."""

    def test_create_empty(self):
        """A new account has no seats and is unlocked."""
        account = Account.create(Email("user@example.com"))

        assert account.total_seats == 0
        assert account.used_seats == 0
        assert not account.locked
        assert account.lock_reason is None

    def test_counts_are_derived(self):
        """total and used seats follow the seat list."""
        seats = [Seat.create().assign("a"), Seat.create(), Seat.create().assign("b")]
        account = make_account(seats=seats)

        assert account.total_seats == 3
        assert account.used_seats == 2

    def test_duplicate_seat_ids_rejected(self):
        """Seat ids are unique within an account."""
        seat = Seat.create()

        with pytest.raises(ValueError):
            make_account(seats=[seat, seat])

    def test_adding_unpaid_seat_relocks(self):
        """Seat changes re-run the lock policy."""
        account = make_account(seats=[Seat.create()])
        seat = account.seats[0]

        updated = account.replace_seat(seat.revoke("license_key_disabled"))

        assert updated.locked
        assert updated.lock_reason == SEAT_UNPAID
        assert not account.locked

    def test_removing_unpaid_seat_unlocks(self):
        """Removing the only unpaid seat lifts a seat_unpaid lock."""
        bad = Seat.create().revoke("order_refunded")
        account = make_account(seats=[Seat.create(), bad]).apply_lock_policy()
        assert account.locked

        updated = account.remove_seat(bad.id)

        assert not updated.locked
        assert updated.lock_reason is None

    def test_replace_foreign_seat_rejected(self):
        """Seats from other accounts cannot be swapped in."""
        account = make_account(seats=[Seat.create()])

        with pytest.raises(ValueError):
            account.replace_seat(Seat.create())

    def test_first_assignable_skips_unpaid_and_bound(self):
        """Creation order, skipping bound, revoked and unpaid seats."""
        bound = Seat.create().assign("a")
        revoked = Seat.create().revoke("license_key_deleted")
        free = Seat.create()
        account = make_account(seats=[bound, revoked, free, Seat.create()])

        assert account.first_assignable_seat() == free

    def test_mark_processed_ignores_missing_id(self):
        """Events without an id are never recorded."""
        account = make_account()

        assert account.mark_processed(None) is account
        assert account.mark_processed("evt-1").has_processed("evt-1")
        assert not account.has_processed(None)

    def test_clear_lock_reason_then_policy_unlocks(self):
        """Clearing an explicit reason lets the policy unlock."""
        account = make_account(locked=True, lock_reason="subscription_expired")

        updated = account.clear_lock_reason().apply_lock_policy()

        assert not updated.locked
        assert updated.lock_reason is None

    def test_apply_lock_policy_identity_when_stable(self):
        """No change returns the very same aggregate."""
        account = make_account(seats=[Seat.create()])

        assert account.apply_lock_policy() is account
