"""
Django admin configuration for accounts app.
"""
from django.contrib import admin

from accounts.infrastructure.models import Account, ProcessedEvent, RedeemedKey, Seat


class SeatInline(admin.TabularInline):
    """Seats shown on the account page."""

    model = Seat
    extra = 0
    fields = [
        "id",
        "position",
        "assigned_device_id",
        "assigned_device_name",
        "source_key",
        "payment_active",
        "revoked",
        "revocation_reason",
    ]
    readonly_fields = ["id", "position", "source_key"]


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    """Admin interface for Account model."""

    list_display = ["email", "locked", "lock_reason", "seat_count", "created_at"]
    list_filter = ["locked", "lock_reason", "created_at"]
    search_fields = ["email"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [SeatInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "email"),
            },
        ),
        (
            "Lock State",
            {
                "fields": ("locked", "lock_reason"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def seat_count(self, obj):
        """Display number of seats on the account."""
        return obj.seats.count()

    seat_count.short_description = "Seats"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).prefetch_related("seats")


@admin.register(RedeemedKey)
class RedeemedKeyAdmin(admin.ModelAdmin):
    """Admin interface for RedeemedKey model."""

    list_display = ["license_key", "account", "redeemed_by_email", "redeemed_at"]
    search_fields = ["license_key", "redeemed_by_email", "account__email"]
    readonly_fields = ["id", "account", "license_key", "redeemed_at", "redeemed_by_email"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("account")


@admin.register(ProcessedEvent)
class ProcessedEventAdmin(admin.ModelAdmin):
    """Admin interface for ProcessedEvent model (read-only)."""

    list_display = ["event_id", "account", "processed_at"]
    search_fields = ["event_id", "account__email"]
    readonly_fields = ["id", "account", "event_id", "processed_at"]

    def has_add_permission(self, request):
        """Processed events are written by webhook reconciliation only."""
        return False
