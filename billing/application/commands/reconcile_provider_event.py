"""
ReconcileProviderEventCommand.

Command carrying one raw webhook delivery from the payment provider.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ReconcileProviderEventCommand:
    """Command to verify and apply a provider webhook."""

    raw_body: bytes
    signature: Optional[str] = None
    header_event_name: Optional[str] = None
