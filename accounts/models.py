"""
Model registry for the accounts app.

The ORM models live in ``accounts.infrastructure.models``; importing them
here makes Django create their tables for this app.
"""
from accounts.infrastructure.models import (  # noqa: F401
    Account,
    ProcessedEvent,
    RedeemedKey,
    Seat,
)
