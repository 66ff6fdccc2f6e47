"""
Seat quantity oracle port (interface).
"""
from abc import ABC, abstractmethod
from typing import Optional


class SeatQuantityOracle(ABC):
    """Tells how many seats the provider believes a customer paid for."""

    @abstractmethod
    async def quantity_for_customer(self, email: str) -> Optional[int]:
        """
        Args:
            email: Normalized customer email

        Returns:
            Positive quantity, or None if unknown or unavailable
        """
        pass


class NullSeatQuantity(SeatQuantityOracle):
    """No provider configured: quantity is always unknown."""

    async def quantity_for_customer(self, email: str) -> Optional[int]:
        return None
