"""
Django implementation of AccountRepository port.

This adapter converts between the Account aggregate and Django ORM models
and runs every mutation as one database transaction holding a row lock on
the account.
"""

import logging
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Max

from accounts.domain.account import Account, RedemptionRecord, Seat
from accounts.infrastructure.models import Account as AccountModel
from accounts.infrastructure.models import ProcessedEvent as ProcessedEventModel
from accounts.infrastructure.models import RedeemedKey as RedeemedKeyModel
from accounts.infrastructure.models import Seat as SeatModel
from accounts.ports.account_repository import AccountOperation, AccountRepository, T
from core.domain.exceptions import KeyAlreadyRedeemedError, TransientStoreError
from core.domain.value_objects import Email
from licenses.infrastructure.models import GlobalRedemption

logger = logging.getLogger(__name__)


class DjangoAccountRepository(AccountRepository):
    """
    Django ORM implementation of AccountRepository.

    This adapter:
    1. Converts Django models to the Account aggregate
    2. Writes only the rows that changed between two aggregates
    3. Serializes writers per account with ``SELECT ... FOR UPDATE``
    """

    def _to_domain(self, model: AccountModel) -> Account:
        """
        Convert Django models to the Account aggregate.

        Args:
            model: Django Account model

        Returns:
            Account aggregate
        """
        seats = tuple(
            Seat(
                id=seat.id,
                assigned_device_id=seat.assigned_device_id,
                assigned_device_name=seat.assigned_device_name,
                source_key=seat.source_key,
                payment_active=seat.payment_active,
                revoked=seat.revoked,
                revocation_reason=seat.revocation_reason,
                created_at=seat.created_at,
            )
            for seat in model.seats.all()
        )
        redeemed = {
            row.license_key: RedemptionRecord(
                redeemed_at=row.redeemed_at,
                redeemed_by_email=row.redeemed_by_email,
            )
            for row in model.redeemed_keys.all()
        }
        processed = frozenset(model.processed_events.values_list("event_id", flat=True))
        return Account(
            email=Email(model.email),
            seats=seats,
            redeemed_keys=redeemed,
            locked=model.locked,
            lock_reason=model.lock_reason,
            processed_event_ids=processed,
        )

    @staticmethod
    def _seat_fields(seat: Seat) -> dict:
        return {
            "assigned_device_id": seat.assigned_device_id,
            "assigned_device_name": seat.assigned_device_name,
            "source_key": seat.source_key,
            "payment_active": seat.payment_active,
            "revoked": seat.revoked,
            "revocation_reason": seat.revocation_reason,
            "created_at": seat.created_at,
        }

    def _persist(self, model: AccountModel, before: Account, after: Account) -> None:
        """
        Write the difference between two versions of an account.

        Must run inside the transaction that locked ``model``.
        """
        # pylint: disable=no-member
        new_keys = {
            key: record
            for key, record in after.redeemed_keys.items()
            if key not in before.redeemed_keys
        }
        for key, record in new_keys.items():
            try:
                with transaction.atomic():
                    GlobalRedemption.objects.create(
                        license_key=key,
                        redeemed_at=record.redeemed_at,
                        redeemed_by_email=record.redeemed_by_email,
                    )
            except IntegrityError as exc:
                raise KeyAlreadyRedeemedError() from exc
            RedeemedKeyModel.objects.create(
                account=model,
                license_key=key,
                redeemed_at=record.redeemed_at,
                redeemed_by_email=record.redeemed_by_email,
            )

        kept_ids = {seat.id for seat in after.seats}
        removed_ids = [seat.id for seat in before.seats if seat.id not in kept_ids]
        if removed_ids:
            SeatModel.objects.filter(account=model, id__in=removed_ids).delete()

        previous = {seat.id: seat for seat in before.seats}
        changed = [
            seat for seat in after.seats if seat.id in previous and previous[seat.id] != seat
        ]
        # Free bindings first so a device moving between seats never
        # trips the per-account device uniqueness constraint.
        changed.sort(key=lambda seat: seat.assigned_device_id is not None)
        for seat in changed:
            SeatModel.objects.filter(account=model, id=seat.id).update(**self._seat_fields(seat))

        # Positions only grow, so reloads keep creation order after removals.
        last = SeatModel.objects.filter(account=model).aggregate(last=Max("position"))["last"]
        next_position = 0 if last is None else last + 1
        for seat in after.seats:
            if seat.id in previous:
                continue
            SeatModel.objects.create(
                id=seat.id,
                account=model,
                position=next_position,
                **self._seat_fields(seat),
            )
            next_position += 1

        ProcessedEventModel.objects.bulk_create(
            [
                ProcessedEventModel(account=model, event_id=event_id)
                for event_id in sorted(after.processed_event_ids - before.processed_event_ids)
            ]
        )

        model.locked = after.locked
        model.lock_reason = after.lock_reason
        model.save(update_fields=["locked", "lock_reason", "updated_at"])

    def _update(self, email: Email, operation: AccountOperation) -> T:
        try:
            with transaction.atomic():
                # pylint: disable=no-member
                model, created = AccountModel.objects.select_for_update().get_or_create(
                    email=email.value
                )
                current = Account.create(email) if created else self._to_domain(model)
                updated, result = operation(current)
                if updated is not current:
                    self._persist(model, current, updated)
                elif created:
                    # Read-only operation on an unknown email leaves no row behind.
                    transaction.set_rollback(True)
                return result
        except DatabaseError as exc:
            logger.error(
                "Account transaction failed",
                extra={"email": email.value, "error": str(exc)},
                exc_info=True,
            )
            raise TransientStoreError() from exc

    async def update(self, email: Email, operation: AccountOperation) -> T:
        return await sync_to_async(self._update)(email, operation)

    async def find_by_email(self, email: Email) -> Optional[Account]:
        """
        Find an account by email.

        Args:
            email: Normalized account email

        Returns:
            Account aggregate or None if not found
        """

        def _load() -> Optional[Account]:
            try:
                # pylint: disable=no-member
                model = AccountModel.objects.prefetch_related(
                    "seats", "redeemed_keys", "processed_events"
                ).get(email=email.value)
            except AccountModel.DoesNotExist:  # pylint: disable=no-member
                return None
            return self._to_domain(model)

        try:
            return await sync_to_async(_load)()
        except DatabaseError as exc:
            raise TransientStoreError() from exc
