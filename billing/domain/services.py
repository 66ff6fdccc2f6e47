"""
Billing domain services.

The Event Reconciler applies one verified provider event to one account.
It is a pure function of (account, event): the caller loads and persists.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from accounts.domain.account import Account, Seat
from billing.domain.provider_event import (
    TERMINAL_REVOCATIONS,
    EventCategory,
    ProviderEvent,
)


@dataclass(frozen=True)
class ReconciliationResult:
    """What reconciling one event did to an account."""

    category: EventCategory
    duplicate: bool = False
    seats_created: int = 0
    seats_revoked: int = 0
    seats_restored: int = 0

    @property
    def changed_seats(self) -> bool:
        return bool(self.seats_created or self.seats_revoked or self.seats_restored)


class EventReconciler:
    """Domain service applying provider events to accounts."""

    @staticmethod
    def apply(
        account: Account,
        event: ProviderEvent,
        order_quantity: Optional[int] = None,
        create_seats_on_order: bool = False,
    ) -> Tuple[Account, ReconciliationResult]:
        """
        Apply one event.

        Replaying an event whose id was already processed returns the
        account unchanged. Events that mean nothing for account state are
        not recorded either.

        Args:
            account: Account aggregate resolved from the event's email
            event: Verified provider event
            order_quantity: Seats to create for ``order_created`` when the
                payload carries no quantity
            create_seats_on_order: Seat creation policy for orders

        Returns:
            Tuple of (updated account, ReconciliationResult)
        """
        category = event.category
        if account.has_processed(event.event_id):
            return account, ReconciliationResult(category=category, duplicate=True)
        if category is EventCategory.NONE:
            return account, ReconciliationResult(category=category)

        updated = account
        created = revoked = restored = 0

        if category is EventCategory.ORDER_CREATED:
            updated, created = EventReconciler._create_order_seats(
                updated, event, order_quantity, create_seats_on_order
            )
        elif category is EventCategory.SUBSCRIPTION_BAD:
            updated = updated.force_lock(event.event_name)
        elif category is EventCategory.SUBSCRIPTION_GOOD:
            if event.carries_unlock_intent:
                updated = updated.clear_lock_reason()
        elif category is EventCategory.KEY_REVOKING and event.license_key:
            for seat in updated.seats_for_key(event.license_key):
                new_seat = EventReconciler._revoke(seat, event.revocation_reason)
                if new_seat != seat:
                    updated = updated.replace_seat(new_seat)
                    revoked += 1
        elif category is EventCategory.KEY_RESTORING and event.license_key:
            for seat in updated.seats_for_key(event.license_key):
                new_seat = EventReconciler._restore(seat)
                if new_seat != seat:
                    updated = updated.replace_seat(new_seat)
                    restored += 1

        updated = updated.apply_lock_policy().mark_processed(event.event_id)
        return updated, ReconciliationResult(
            category=category,
            seats_created=created,
            seats_revoked=revoked,
            seats_restored=restored,
        )

    @staticmethod
    def _create_order_seats(
        account: Account,
        event: ProviderEvent,
        order_quantity: Optional[int],
        create_seats_on_order: bool,
    ) -> Tuple[Account, int]:
        marker = event.order_marker
        if not create_seats_on_order or account.has_processed(marker):
            return account, 0

        quantity = event.quantity or order_quantity or 1
        updated = account
        for _ in range(quantity):
            updated = updated.add_seat(Seat.create())
        return updated.mark_processed(marker), quantity

    @staticmethod
    def _revoke(seat: Seat, reason: str) -> Seat:
        """Terminal revocations are never downgraded to restorable ones."""
        if seat.revoked and seat.revocation_reason in TERMINAL_REVOCATIONS:
            return seat
        return seat.revoke(reason)

    @staticmethod
    def _restore(seat: Seat) -> Seat:
        """Restore unless the seat was revoked by a deletion or refund."""
        if seat.revoked and seat.revocation_reason in TERMINAL_REVOCATIONS:
            return seat
        if seat.payment_active and not seat.revoked:
            return seat
        return seat.restore()
