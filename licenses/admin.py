"""
Django admin configuration for licenses app.
"""
from django.contrib import admin

from licenses.infrastructure.models import GlobalRedemption


@admin.register(GlobalRedemption)
class GlobalRedemptionAdmin(admin.ModelAdmin):
    """Admin interface for GlobalRedemption model (read-only)."""

    list_display = ["license_key", "redeemed_by_email", "redeemed_at"]
    list_filter = ["redeemed_at"]
    search_fields = ["license_key", "redeemed_by_email"]
    readonly_fields = ["id", "license_key", "redeemed_at", "redeemed_by_email"]

    def has_add_permission(self, request):
        """Redemptions are recorded by the redeem endpoint only."""
        return False

    def has_delete_permission(self, request, obj=None):
        """A consumed key stays consumed."""
        return False
