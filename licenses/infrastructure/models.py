"""
Global redemption registry model.
"""
import uuid

from django.db import models


class GlobalRedemption(models.Model):
    """
    Cross-account index of consumed license keys.

    The unique constraint on ``license_key`` is what makes two concurrent
    redemptions of the same key from different accounts fail for one of
    them. Rows are never deleted, not even when the seat is removed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.CharField(
        max_length=255,
        unique=True,
        db_index=True,
        help_text="Normalized (trimmed, case-folded) license key",
    )
    redeemed_at = models.DateTimeField()
    redeemed_by_email = models.CharField(max_length=254, db_index=True)

    class Meta:
        db_table = "global_redemptions"
        ordering = ["-redeemed_at"]

    def __str__(self):
        return f"{self.license_key} ({self.redeemed_by_email})"
