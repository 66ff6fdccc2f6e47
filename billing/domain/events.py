"""
Billing domain events.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ProviderEventReconciled(DomainEvent):
    """Event raised after a provider webhook event changed an account."""

    event_name: str
    provider_event_id: Optional[str] = None
    category: str
    seats_created: int = 0
    seats_revoked: int = 0
    seats_restored: int = 0
