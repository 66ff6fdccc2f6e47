"""
Redemption DTOs for API responses.
"""
import uuid
from dataclasses import dataclass


@dataclass
class RedeemLicenseKeyResponseDTO:
    """DTO for redeem response."""

    seat_id: uuid.UUID
    total_seats: int
    used_seats: int
