"""
Django admin configuration for packs app.
"""

from django.contrib import admin

from packs.infrastructure.models import SubscriptionPack


@admin.register(SubscriptionPack)
class SubscriptionPackAdmin(admin.ModelAdmin):
    """Admin interface for SubscriptionPack model."""

    list_display = ["name", "sku", "price", "validity_months", "state", "created_at"]
    list_filter = ["state", "validity_months", "created_at"]
    search_fields = ["name", "sku"]
    readonly_fields = ["id", "created_at", "updated_at", "deleted_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "description", "sku"),
            },
        ),
        (
            "Pricing",
            {
                "fields": ("price", "validity_months"),
            },
        ),
        (
            "Catalog State",
            {
                "fields": ("state", "deleted_at"),
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
