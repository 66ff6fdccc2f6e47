"""
Reconciliation DTOs for webhook responses.
"""
from dataclasses import dataclass
from typing import Optional

OUTCOME_APPLIED = "applied"
OUTCOME_DUPLICATE = "duplicate"
OUTCOME_IGNORED = "ignored"


@dataclass
class ReconcileProviderEventResponseDTO:
    """DTO for webhook response; every outcome is a 200 for the provider."""

    outcome: str
    event_name: str
    event_id: Optional[str] = None
    category: Optional[str] = None
    email: Optional[str] = None
