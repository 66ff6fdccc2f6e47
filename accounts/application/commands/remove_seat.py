"""
RemoveSeatCommand.

Administrative command to delete a seat.
"""
import uuid
from dataclasses import dataclass


@dataclass
class RemoveSeatCommand:
    """Command to remove a seat from an account."""

    email: str
    seat_id: uuid.UUID
