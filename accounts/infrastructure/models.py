"""
Account Django ORM models.

This is the infrastructure layer model for accounts.
Domain entities are in accounts.domain.account.
"""
import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone


class Account(models.Model):
    """
    A billing identity keyed by lower-cased email.
    Holds seats, the account-local redemption registry and lock state.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.CharField(max_length=254, unique=True, db_index=True)
    locked = models.BooleanField(default=False)
    lock_reason = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "accounts"
        ordering = ["email"]

    def clean(self):
        """Validate account fields."""
        from django.core.exceptions import ValidationError

        if self.email != self.email.strip().lower() or "@" not in self.email:
            raise ValidationError("Account email must be lower-cased and contain '@'")
        if not self.locked and self.lock_reason:
            raise ValidationError("Unlocked accounts cannot carry a lock reason")

    def __str__(self):
        return f"{self.email} ({'locked' if self.locked else 'unlocked'})"


class Seat(models.Model):
    """
    One unit of license entitlement, optionally bound to a device.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name="seats",
    )
    position = models.PositiveIntegerField(
        default=0, help_text="Creation order within the account"
    )
    assigned_device_id = models.CharField(max_length=500, null=True, blank=True)
    assigned_device_name = models.CharField(max_length=500, null=True, blank=True)
    source_key = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        help_text="Normalized license key that produced this seat",
    )
    payment_active = models.BooleanField(default=True)
    revoked = models.BooleanField(default=False)
    revocation_reason = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "seats"
        ordering = ["position", "created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["account", "assigned_device_id"],
                condition=Q(assigned_device_id__isnull=False),
                name="unique_device_per_account",
            ),
        ]
        indexes = [
            models.Index(fields=["account", "position"]),
        ]

    def __str__(self):
        return f"{self.account.email} seat {self.id} @ {self.assigned_device_id or '-'}"


class RedeemedKey(models.Model):
    """
    Account-local redemption registry entry.
    Mirrors a GlobalRedemption row written in the same transaction.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name="redeemed_keys",
    )
    license_key = models.CharField(max_length=255)
    redeemed_at = models.DateTimeField()
    redeemed_by_email = models.CharField(max_length=254)

    class Meta:
        db_table = "account_redeemed_keys"
        unique_together = [["account", "license_key"]]
        ordering = ["redeemed_at"]

    def __str__(self):
        return f"{self.license_key} -> {self.redeemed_by_email}"


class ProcessedEvent(models.Model):
    """
    Idempotency ledger of provider events applied to an account.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name="processed_events",
    )
    event_id = models.CharField(max_length=255)
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "account_processed_events"
        unique_together = [["account", "event_id"]]
        ordering = ["processed_at"]

    def __str__(self):
        return f"{self.account.email}: {self.event_id}"
