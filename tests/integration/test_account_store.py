"""
Integration tests for the Django account store and redemption registry.
"""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.apps import apps
from django.db import connection

from accounts.domain.services import SeatAllocator
from accounts.infrastructure.models import Account as AccountModel
from accounts.infrastructure.models import ProcessedEvent, RedeemedKey
from accounts.infrastructure.models import Seat as SeatModel
from core.domain.exceptions import KeyAlreadyRedeemedError, NoFreeSeatError
from core.domain.value_objects import Email
from licenses.domain.services import LicenseKeyRedeemer
from licenses.infrastructure.models import GlobalRedemption


def redeem(repository, email, key, now):
    def operation(account):
        return LicenseKeyRedeemer.redeem(account, key, now)

    return async_to_sync(repository.update)(Email(email), operation)


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoAccountRepository:
    """Integration tests for DjangoAccountRepository."""

    def test_redeem_persists_all_rows(self, django_account_repository, now):
        seat = redeem(django_account_repository, "a@example.com", "key-1", now)

        model = AccountModel.objects.get(email="a@example.com")
        assert SeatModel.objects.get(account=model).id == seat.id
        assert RedeemedKey.objects.filter(account=model, license_key="key-1").exists()
        global_row = GlobalRedemption.objects.get(license_key="key-1")
        assert global_row.redeemed_by_email == "a@example.com"

    def test_round_trip(self, django_account_repository, now):
        redeem(django_account_repository, "a@example.com", "key-1", now)
        redeem(django_account_repository, "a@example.com", "key-2", now)
        async_to_sync(django_account_repository.update)(
            Email("a@example.com"),
            lambda account: SeatAllocator.assign(account, "mac-1", "MacBook"),
        )

        account = async_to_sync(django_account_repository.find_by_email)(Email("a@example.com"))

        assert account.total_seats == 2
        assert account.used_seats == 1
        assert [seat.source_key for seat in account.seats] == ["key-1", "key-2"]
        assert account.seats[0].assigned_device_id == "mac-1"
        assert account.seats[0].assigned_device_name == "MacBook"
        assert account.has_redeemed("key-1")
        assert account.redeemed_keys["key-2"].redeemed_by_email == "a@example.com"

    def test_find_unknown(self, django_account_repository):
        assert async_to_sync(django_account_repository.find_by_email)(
            Email("ghost@example.com")
        ) is None

    def test_key_owned_by_other_account(self, django_account_repository, now):
        redeem(django_account_repository, "a@example.com", "key-1", now)

        with pytest.raises(KeyAlreadyRedeemedError):
            redeem(django_account_repository, "b@example.com", "key-1", now)

        assert not AccountModel.objects.filter(email="b@example.com").exists()
        assert GlobalRedemption.objects.count() == 1

    def test_failed_operation_leaves_no_row(self, django_account_repository):
        with pytest.raises(NoFreeSeatError):
            async_to_sync(django_account_repository.update)(
                Email("ghost@example.com"),
                lambda account: SeatAllocator.assign(account, "mac-1"),
            )

        assert not AccountModel.objects.filter(email="ghost@example.com").exists()

    def test_read_only_operation_leaves_no_row(self, django_account_repository):
        result = async_to_sync(django_account_repository.update)(
            Email("ghost@example.com"),
            lambda account: SeatAllocator.release(account, "mac-1"),
        )

        assert result is None
        assert not AccountModel.objects.filter(email="ghost@example.com").exists()

    def test_remove_seat_keeps_registries(self, django_account_repository, now):
        seat = redeem(django_account_repository, "a@example.com", "key-1", now)

        async_to_sync(django_account_repository.update)(
            Email("a@example.com"),
            lambda account: SeatAllocator.remove_seat(account, seat.id),
        )

        assert not SeatModel.objects.filter(id=seat.id).exists()
        assert RedeemedKey.objects.filter(license_key="key-1").exists()
        assert GlobalRedemption.objects.filter(license_key="key-1").exists()

    def test_creation_order_survives_removal(self, django_account_repository, now):
        seats = [
            redeem(django_account_repository, "a@example.com", key, now + timedelta(minutes=i))
            for i, key in enumerate(["k1", "k2", "k3"])
        ]
        for seat in seats[:2]:
            async_to_sync(django_account_repository.update)(
                Email("a@example.com"),
                lambda account, seat_id=seat.id: SeatAllocator.remove_seat(account, seat_id),
            )
        redeem(django_account_repository, "a@example.com", "k4", now + timedelta(minutes=10))

        account = async_to_sync(django_account_repository.find_by_email)(Email("a@example.com"))
        assert [seat.source_key for seat in account.seats] == ["k3", "k4"]

        _, assigned = async_to_sync(django_account_repository.update)(
            Email("a@example.com"),
            lambda current: SeatAllocator.assign(current, "dev1"),
        )
        assert assigned.id == seats[2].id

    def test_lock_state_and_processed_events(self, django_account_repository, now):
        seat = redeem(django_account_repository, "a@example.com", "key-1", now)

        def revoke(account):
            updated = account.replace_seat(account.find_seat(seat.id).revoke("order_refunded"))
            return updated.mark_processed("evt-1"), None

        async_to_sync(django_account_repository.update)(Email("a@example.com"), revoke)

        model = AccountModel.objects.get(email="a@example.com")
        assert model.locked
        assert model.lock_reason == "seat_unpaid"
        assert ProcessedEvent.objects.filter(account=model, event_id="evt-1").exists()

        account = async_to_sync(django_account_repository.find_by_email)(Email("a@example.com"))
        assert account.has_processed("evt-1")
        assert account.seats[0].revoked
        assert account.seats[0].revocation_reason == "order_refunded"

    def test_device_moves_between_seats(self, django_account_repository, now):
        """Release then reassign never trips the device constraint."""
        redeem(django_account_repository, "a@example.com", "key-1", now)
        redeem(django_account_repository, "a@example.com", "key-2", now)
        email = Email("a@example.com")
        update = async_to_sync(django_account_repository.update)

        update(email, lambda account: SeatAllocator.assign(account, "mac-1"))
        update(email, lambda account: SeatAllocator.assign(account, "mac-2"))
        update(email, lambda account: SeatAllocator.release(account, "mac-1"))
        update(email, lambda account: SeatAllocator.assign(account, "mac-3"))

        bound = dict(
            SeatModel.objects.filter(account__email="a@example.com").values_list(
                "source_key", "assigned_device_id"
            )
        )
        assert bound == {"key-1": "mac-3", "key-2": "mac-2"}


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoRedemptionRegistry:
    """Integration tests for DjangoRedemptionRegistry."""

    def test_find(self, django_account_repository, django_redemption_registry, now):
        redeem(django_account_repository, "a@example.com", "key-1", now)

        record = async_to_sync(django_redemption_registry.find)("key-1")

        assert record.redeemed_by_email == "a@example.com"
        assert record.redeemed_at == now
        assert async_to_sync(django_redemption_registry.find)("key-2") is None


@pytest.mark.django_db
@pytest.mark.integration
@pytest.mark.parametrize(
    "app_label,table",
    [
        ("accounts", "accounts"),
        ("accounts", "seats"),
        ("accounts", "account_redeemed_keys"),
        ("accounts", "account_processed_events"),
        ("licenses", "global_redemptions"),
    ],
)
def test_app_tables_are_created(app_label, table):
    """Models under infrastructure/ are registered with their app."""
    assert apps.get_app_config(app_label).models_module is not None
    assert table in connection.introspection.table_names()
