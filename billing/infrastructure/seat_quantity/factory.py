"""
Builds the configured SeatQuantityOracle from Django settings.
"""
from django.conf import settings

from billing.infrastructure.seat_quantity.lemonsqueezy import LemonSqueezySeatQuantity
from billing.ports.seat_quantity import NullSeatQuantity, SeatQuantityOracle
from core.infrastructure.http import ProviderHttpClient


def build_seat_quantity() -> SeatQuantityOracle:
    """Provider-backed oracle when an API key is configured."""
    if not settings.LEMONSQUEEZY_API_KEY:
        return NullSeatQuantity()
    client = ProviderHttpClient(
        base_url=settings.LEMONSQUEEZY_API_URL,
        timeout=settings.PROVIDER_HTTP_TIMEOUT_SECONDS,
        api_key=settings.LEMONSQUEEZY_API_KEY,
    )
    return LemonSqueezySeatQuantity(client)
