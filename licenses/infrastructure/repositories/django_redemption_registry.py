"""
Django implementation of RedemptionRegistry port.
"""
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError

from accounts.domain.account import RedemptionRecord
from core.domain.exceptions import TransientStoreError
from licenses.infrastructure.models import GlobalRedemption
from licenses.ports.redemption_registry import RedemptionRegistry


class DjangoRedemptionRegistry(RedemptionRegistry):
    """Reads the ``global_redemptions`` table."""

    @sync_to_async
    def find(self, license_key: str) -> Optional[RedemptionRecord]:
        try:
            # pylint: disable=no-member
            model = GlobalRedemption.objects.filter(license_key=license_key).first()
        except DatabaseError as exc:
            raise TransientStoreError() from exc
        if model is None:
            return None
        return RedemptionRecord(
            redeemed_at=model.redeemed_at,
            redeemed_by_email=model.redeemed_by_email,
        )
