"""
AssignSeatCommand.

Command to bind a free seat of an account to a device.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AssignSeatCommand:
    """Command to assign a seat to a device."""

    email: str
    device_id: str
    device_name: Optional[str] = None
