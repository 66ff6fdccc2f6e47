"""
ReleaseSeatCommand.

Command to clear the seat binding of a device.
"""

from dataclasses import dataclass


@dataclass
class ReleaseSeatCommand:
    """Command to release the seat held by a device."""

    email: str
    device_id: str
