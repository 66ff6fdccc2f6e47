"""
Event handlers for domain events.

These handlers run after an account transaction commits, for side effects
like audit logging and business metrics.
"""

import logging

from accounts.domain.events import (
    AccountLockChanged,
    SeatAssigned,
    SeatReleased,
    SeatRemoved,
)
from billing.domain.events import ProviderEventReconciled
from core.domain.events import DomainEvent, EventHandler
from core.metrics import (
    account_lock_transitions_total,
    seats_assigned_total,
    seats_redeemed_total,
    seats_released_total,
    seats_removed_total,
)
from licenses.domain.events import SeatRedeemed

logger = logging.getLogger(__name__)

AUDITED_EVENTS = (
    SeatRedeemed,
    SeatAssigned,
    SeatReleased,
    SeatRemoved,
    AccountLockChanged,
    ProviderEventReconciled,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every domain event to the ``audit`` logger as one structured
    record.
    """

    audit_logger = logging.getLogger("audit")

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        self.audit_logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={"event": event.to_dict()},
        )


class MetricsEventHandler(EventHandler):
    """Increments the business counters in ``core.metrics``."""

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, SeatRedeemed):
            seats_redeemed_total.inc()
        elif isinstance(event, SeatAssigned):
            seats_assigned_total.inc()
        elif isinstance(event, SeatReleased):
            seats_released_total.inc()
        elif isinstance(event, SeatRemoved):
            seats_removed_total.inc()
        elif isinstance(event, AccountLockChanged):
            account_lock_transitions_total.labels(
                locked=str(event.locked).lower(),
                reason=event.reason or "none",
            ).inc()


def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    audit_handler = AuditLogEventHandler()
    metrics_handler = MetricsEventHandler()

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)
        bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
