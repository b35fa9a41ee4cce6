"""
Django admin configuration for subscriptions app.
"""

from django.contrib import admin

from subscriptions.infrastructure.models import Subscription


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    """
    Admin interface for Subscription model.

    Status changes go through the API so that the one-active-subscription
    rule is enforced; the admin is read-only.
    """

    list_display = ["id", "customer", "pack", "status", "assigned_at", "expires_at", "updated_at"]
    list_filter = ["status", "created_at", "expires_at"]
    search_fields = ["id", "customer__name", "pack__sku", "pack__name"]
    list_select_related = ["customer", "pack"]
    fieldsets = (
        (
            "Subscription",
            {
                "fields": ("id", "customer", "pack", "status"),
            },
        ),
        (
            "Lifecycle",
            {
                "fields": (
                    "requested_at",
                    "approved_at",
                    "assigned_at",
                    "expires_at",
                    "deactivated_at",
                ),
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

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
