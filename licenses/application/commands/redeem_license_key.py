"""
RedeemLicenseKeyCommand.

Command to exchange a one-time license key for a seat.
"""

from dataclasses import dataclass


@dataclass
class RedeemLicenseKeyCommand:
    """Command to redeem a license key into an account."""

    email: str
    license_key: str
