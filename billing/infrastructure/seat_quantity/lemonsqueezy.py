"""
Lemon Squeezy implementation of SeatQuantityOracle.

Sums the item quantity of the customer's live subscriptions via
``GET /v1/subscriptions?filter[user_email]=...``.
"""
import logging
from typing import Optional

from billing.ports.seat_quantity import SeatQuantityOracle
from core.infrastructure.http import ProviderHttpClient, ProviderRequestError

logger = logging.getLogger(__name__)

LIVE_STATUSES = frozenset({"active", "on_trial", "past_due"})


class LemonSqueezySeatQuantity(SeatQuantityOracle):
    """Reads subscription quantities with the store API key."""

    def __init__(self, client: ProviderHttpClient):
        self.client = client

    async def quantity_for_customer(self, email: str) -> Optional[int]:
        try:
            response = await self.client.arequest(
                "GET",
                "/v1/subscriptions",
                operation="subscription_quantity",
                params={"filter[user_email]": email},
            )
        except ProviderRequestError:
            return None

        if response.status_code != 200:
            logger.warning(
                "Subscription lookup failed",
                extra={"status_code": response.status_code, "email": email},
            )
            return None

        total = 0
        for subscription in ProviderHttpClient.json(response).get("data") or []:
            attributes = subscription.get("attributes") or {}
            if attributes.get("status") not in LIVE_STATUSES:
                continue
            item = attributes.get("first_subscription_item") or {}
            try:
                total += max(int(item.get("quantity") or 1), 0)
            except (TypeError, ValueError):
                total += 1
        return total or None
