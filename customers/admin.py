"""
Django admin configuration for customers app.
"""

from django.contrib import admin

from customers.infrastructure.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer model."""

    list_display = ["name", "identity_id", "phone", "created_at", "deleted_at"]
    list_filter = ["created_at", "deleted_at"]
    search_fields = ["name", "identity_id", "phone"]
    readonly_fields = ["id", "created_at", "updated_at"]
