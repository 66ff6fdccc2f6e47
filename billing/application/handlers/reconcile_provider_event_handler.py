"""
ReconcileProviderEventHandler.

Handler for provider webhooks: verify the signature, extract the event,
apply it to the customer's account in one transaction.
"""

import logging
from typing import Optional

from accounts.domain.events import lock_change
from accounts.ports.account_repository import AccountRepository
from billing.application.commands.reconcile_provider_event import (
    ReconcileProviderEventCommand,
)
from billing.application.dto.reconciliation_dto import (
    OUTCOME_APPLIED,
    OUTCOME_DUPLICATE,
    OUTCOME_IGNORED,
    ReconcileProviderEventResponseDTO,
)
from billing.domain.events import ProviderEventReconciled
from billing.domain.provider_event import EventCategory, ProviderEvent, parse_payload
from billing.domain.services import EventReconciler
from billing.ports.seat_quantity import NullSeatQuantity, SeatQuantityOracle
from core.domain.events import EventBus
from core.domain.exceptions import AuthenticityError, WebhookMisconfiguredError
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus as default_event_bus
from core.infrastructure.webhooks import WebhookSignatureVerifier
from core.metrics import webhook_events_total

logger = logging.getLogger(__name__)


class ReconcileProviderEventHandler:
    """Handler for ReconcileProviderEventCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        signing_secret: str,
        seat_quantity: Optional[SeatQuantityOracle] = None,
        create_seats_on_order: bool = False,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize handler with repository, secret and seat policy."""
        self.account_repository = account_repository
        self.signing_secret = signing_secret
        self.seat_quantity = seat_quantity or NullSeatQuantity()
        self.create_seats_on_order = create_seats_on_order
        self.event_bus = event_bus or default_event_bus

    def _verify(self, command: ReconcileProviderEventCommand) -> None:
        if not self.signing_secret:
            logger.error("Webhook signing secret is not configured")
            raise WebhookMisconfiguredError()
        if not command.signature:
            webhook_events_total.labels(event_name="unknown", outcome="rejected").inc()
            raise AuthenticityError("missing signature", code="missing_signature")
        if not WebhookSignatureVerifier.verify(
            command.raw_body, command.signature, self.signing_secret
        ):
            webhook_events_total.labels(event_name="unknown", outcome="rejected").inc()
            raise AuthenticityError()

    def _ignored(self, event: ProviderEvent, reason: str) -> ReconcileProviderEventResponseDTO:
        logger.info(
            "Webhook event ignored",
            extra={"event_name": event.event_name, "event_id": event.event_id, "reason": reason},
        )
        webhook_events_total.labels(event_name=event.event_name, outcome=OUTCOME_IGNORED).inc()
        return ReconcileProviderEventResponseDTO(
            outcome=OUTCOME_IGNORED,
            event_name=event.event_name,
            event_id=event.event_id,
            category=event.category.value,
            email=event.customer_email,
        )

    async def handle(
        self, command: ReconcileProviderEventCommand
    ) -> ReconcileProviderEventResponseDTO:
        """
        Handle a provider webhook.

        Args:
            command: ReconcileProviderEventCommand

        Returns:
            ReconcileProviderEventResponseDTO; malformed or irrelevant
            events come back as ``ignored`` rather than an error

        Raises:
            WebhookMisconfiguredError: If no signing secret is configured
            AuthenticityError: If the signature is missing or wrong
            TransientStoreError: If the account could not be written
        """
        self._verify(command)

        event = ProviderEvent.from_payload(
            parse_payload(command.raw_body), command.header_event_name
        )
        if not event.customer_email:
            return self._ignored(event, "no customer email")
        if event.category is EventCategory.NONE:
            return self._ignored(event, "event not relevant")

        email = Email(event.customer_email)

        order_quantity = None
        if (
            event.category is EventCategory.ORDER_CREATED
            and self.create_seats_on_order
            and event.quantity is None
        ):
            order_quantity = await self.seat_quantity.quantity_for_customer(email.value)

        def operation(account):
            updated, result = EventReconciler.apply(
                account,
                event,
                order_quantity=order_quantity,
                create_seats_on_order=self.create_seats_on_order,
            )
            return updated, (account, updated, result)

        before, after, result = await self.account_repository.update(email, operation)

        outcome = OUTCOME_DUPLICATE if result.duplicate else OUTCOME_APPLIED
        webhook_events_total.labels(event_name=event.event_name, outcome=outcome).inc()

        if after is not before:
            await self.event_bus.publish(
                ProviderEventReconciled(
                    aggregate_id=email.value,
                    event_name=event.event_name,
                    provider_event_id=event.event_id,
                    category=result.category.value,
                    seats_created=result.seats_created,
                    seats_revoked=result.seats_revoked,
                    seats_restored=result.seats_restored,
                )
            )
            change = lock_change(before, after)
            if change:
                await self.event_bus.publish(change)

        logger.info(
            "Webhook event reconciled",
            extra={
                "event_name": event.event_name,
                "event_id": event.event_id,
                "email": email.value,
                "outcome": outcome,
                "locked": after.locked,
                "lock_reason": after.lock_reason,
            },
        )

        return ReconcileProviderEventResponseDTO(
            outcome=outcome,
            event_name=event.event_name,
            event_id=event.event_id,
            category=result.category.value,
            email=email.value,
        )
