"""
Unit tests for the seat handlers and the account status query.
"""

import uuid

import pytest

from accounts.application.commands.assign_seat import AssignSeatCommand
from accounts.application.commands.release_seat import ReleaseSeatCommand
from accounts.application.commands.remove_seat import RemoveSeatCommand
from accounts.application.handlers.assign_seat_handler import AssignSeatHandler
from accounts.application.handlers.get_account_status_handler import GetAccountStatusHandler
from accounts.application.handlers.release_seat_handler import ReleaseSeatHandler
from accounts.application.handlers.remove_seat_handler import RemoveSeatHandler
from accounts.application.queries.get_account_status import GetAccountStatusQuery
from accounts.domain.events import AccountLockChanged, SeatAssigned, SeatReleased, SeatRemoved
from core.domain.exceptions import (
    AccountLockedError,
    DeviceIdMissingError,
    EmailMissingError,
    NoFreeSeatError,
    SeatNotFoundError,
)
from core.domain.value_objects import Email


@pytest.mark.asyncio
class TestAssignSeatHandler:
    """Tests for AssignSeatHandler."""

    async def test_assign(self, account_repository, event_bus, seeded_account):
        await seeded_account(seat_count=2)
        handler = AssignSeatHandler(account_repository=account_repository, event_bus=event_bus)

        result = await handler.handle(
            AssignSeatCommand(email="USER@example.com", device_id="mac-1", device_name="MacBook")
        )

        assert result.total_seats == 2
        assert result.used_seats == 1
        assert not result.already_assigned
        [event] = event_bus.of_type(SeatAssigned)
        assert event.seat_id == result.seat_id

    async def test_assign_twice_returns_same_seat(
        self, account_repository, event_bus, seeded_account
    ):
        await seeded_account(seat_count=2)
        handler = AssignSeatHandler(account_repository=account_repository, event_bus=event_bus)
        first = await handler.handle(AssignSeatCommand(email="user@example.com", device_id="d"))
        writes = account_repository.writes

        second = await handler.handle(AssignSeatCommand(email="user@example.com", device_id="d"))

        assert second.seat_id == first.seat_id
        assert second.already_assigned
        assert second.used_seats == 1
        assert account_repository.writes == writes
        assert len(event_bus.of_type(SeatAssigned)) == 1

    async def test_unknown_account_has_no_free_seat(self, account_repository, event_bus):
        handler = AssignSeatHandler(account_repository=account_repository, event_bus=event_bus)

        with pytest.raises(NoFreeSeatError):
            await handler.handle(AssignSeatCommand(email="ghost@example.com", device_id="d"))

        assert await account_repository.find_by_email(Email("ghost@example.com")) is None

    async def test_locked_account(self, account_repository, event_bus, seeded_account):
        await seeded_account(locked=True, lock_reason="subscription_expired")
        handler = AssignSeatHandler(account_repository=account_repository, event_bus=event_bus)

        with pytest.raises(AccountLockedError):
            await handler.handle(AssignSeatCommand(email="user@example.com", device_id="d"))

    async def test_email_checked_before_device(self, account_repository, event_bus):
        handler = AssignSeatHandler(account_repository=account_repository, event_bus=event_bus)

        with pytest.raises(EmailMissingError):
            await handler.handle(AssignSeatCommand(email="", device_id=""))
        with pytest.raises(DeviceIdMissingError):
            await handler.handle(AssignSeatCommand(email="user@example.com", device_id="  "))


@pytest.mark.asyncio
class TestReleaseSeatHandler:
    """Tests for ReleaseSeatHandler."""

    async def test_release(self, account_repository, event_bus, seeded_account):
        await seeded_account(seat_count=1)
        assign = AssignSeatHandler(account_repository=account_repository, event_bus=event_bus)
        assigned = await assign.handle(AssignSeatCommand(email="user@example.com", device_id="d"))
        handler = ReleaseSeatHandler(account_repository=account_repository, event_bus=event_bus)

        result = await handler.handle(ReleaseSeatCommand(email="user@example.com", device_id="d"))

        assert result.released
        assert result.seat_id == assigned.seat_id
        assert len(event_bus.of_type(SeatReleased)) == 1
        account = await account_repository.find_by_email(Email("user@example.com"))
        assert account.used_seats == 0

    async def test_release_unbound_device(self, account_repository, event_bus):
        handler = ReleaseSeatHandler(account_repository=account_repository, event_bus=event_bus)

        result = await handler.handle(
            ReleaseSeatCommand(email="ghost@example.com", device_id="d")
        )

        assert not result.released
        assert result.message == "already free"
        assert event_bus.published == []
        assert account_repository.writes == 0

    async def test_release_on_locked_account(
        self, account_repository, event_bus, seeded_account
    ):
        await seeded_account(seat_count=1)
        assign = AssignSeatHandler(account_repository=account_repository, event_bus=event_bus)
        await assign.handle(AssignSeatCommand(email="user@example.com", device_id="d"))
        await account_repository.update(
            Email("user@example.com"),
            lambda account: (account.force_lock("subscription_expired"), None),
        )
        handler = ReleaseSeatHandler(account_repository=account_repository, event_bus=event_bus)

        result = await handler.handle(ReleaseSeatCommand(email="user@example.com", device_id="d"))

        assert result.released


@pytest.mark.asyncio
class TestRemoveSeatHandler:
    """Tests for RemoveSeatHandler."""

    async def test_remove(self, account_repository, event_bus, seeded_account):
        account = await seeded_account(seat_count=2)
        seat = account.seats[0]
        handler = RemoveSeatHandler(account_repository=account_repository, event_bus=event_bus)

        result = await handler.handle(RemoveSeatCommand(email="user@example.com", seat_id=seat.id))

        assert result.seat_id == seat.id
        assert result.total_seats == 1
        [event] = event_bus.of_type(SeatRemoved)
        assert event.source_key == "*ey-0"
        assert "key-0" not in str(event.to_dict())
        stored = await account_repository.find_by_email(Email("user@example.com"))
        assert stored.has_redeemed("key-0")
        assert await account_repository.registry.find("key-0") is not None

    async def test_remove_unpaid_seat_unlocks(
        self, account_repository, event_bus, seeded_account
    ):
        account = await seeded_account(seat_count=2)
        revoked = account.seats[1].revoke("order_refunded")
        await account_repository.update(
            Email("user@example.com"), lambda current: (current.replace_seat(revoked), None)
        )
        handler = RemoveSeatHandler(account_repository=account_repository, event_bus=event_bus)

        await handler.handle(RemoveSeatCommand(email="user@example.com", seat_id=revoked.id))

        stored = await account_repository.find_by_email(Email("user@example.com"))
        assert not stored.locked
        [change] = event_bus.of_type(AccountLockChanged)
        assert change.locked is False

    async def test_remove_unknown_seat(self, account_repository, event_bus, seeded_account):
        await seeded_account(seat_count=1)
        handler = RemoveSeatHandler(account_repository=account_repository, event_bus=event_bus)

        with pytest.raises(SeatNotFoundError):
            await handler.handle(
                RemoveSeatCommand(email="user@example.com", seat_id=uuid.uuid4())
            )


@pytest.mark.asyncio
class TestGetAccountStatusHandler:
    """Tests for GetAccountStatusHandler."""

    async def test_status(self, account_repository, seeded_account):
        await seeded_account(seat_count=3)
        handler = GetAccountStatusHandler(account_repository=account_repository)

        result = await handler.handle(GetAccountStatusQuery(email=" User@Example.com "))

        assert result.email == "user@example.com"
        assert result.total_seats == 3
        assert result.used_seats == 0
        assert not result.locked
        assert len(result.seats) == 3

    async def test_unknown_email_reads_empty(self, account_repository):
        handler = GetAccountStatusHandler(account_repository=account_repository)

        result = await handler.handle(GetAccountStatusQuery(email="ghost@example.com"))

        assert result.total_seats == 0
        assert result.lock_reason is None
        assert await account_repository.find_by_email(Email("ghost@example.com")) is None
