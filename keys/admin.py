"""
Django admin configuration for keys app.

Key records are changed only through the key store, so the admin is a
read-only listing.
"""
from django.contrib import admin

from keys.infrastructure.models import KeyRecord


@admin.register(KeyRecord)
class KeyRecordAdmin(admin.ModelAdmin):
    """Read-only admin interface for KeyRecord model."""

    list_display = [
        "key_prefix",
        "name",
        "policy",
        "is_active",
        "uses",
        "device_name",
        "expires_at",
        "created_at",
    ]
    list_filter = ["is_active", "policy", "created_at"]
    search_fields = ["name", "key", "device_id", "device_name"]
    readonly_fields = [
        "key",
        "name",
        "is_active",
        "policy",
        "uses",
        "created_at",
        "last_used_at",
        "activated_at",
        "expires_at",
        "device_id",
        "device_name",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("key", "name", "is_active", "policy", "uses"),
            },
        ),
        (
            "Device",
            {
                "fields": ("device_id", "device_name", "activated_at"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "last_used_at", "expires_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def key_prefix(self, obj):
        """Display only the start of the key."""
        return f"{obj.key[:8]}..."

    key_prefix.short_description = "Key"

    def has_add_permission(self, request):
        """Keys are minted through the admin API."""
        return False

    def has_change_permission(self, request, obj=None):
        """Key records are read-only."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Keys are deleted through the admin API."""
        return False
