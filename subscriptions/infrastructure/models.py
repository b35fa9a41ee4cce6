"""
Subscription model.
"""
import uuid

from django.db import models
from django.utils import timezone


class Subscription(models.Model):
    """
    A customer's instance of a subscription pack.

    Rows are never deleted; terminal records stay as history.
    """

    STATUS_CHOICES = [
        ("requested", "Requested"),
        ("approved", "Approved"),
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("expired", "Expired"),
    ]

    OPEN_STATUSES = ("requested", "approved", "active")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        "customers.Customer", on_delete=models.PROTECT, related_name="subscriptions"
    )
    pack = models.ForeignKey(
        "packs.SubscriptionPack", on_delete=models.PROTECT, related_name="subscriptions"
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="requested")
    requested_at = models.DateTimeField(default=timezone.now)
    approved_at = models.DateTimeField(null=True, blank=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    deactivated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "subscriptions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "status"]),
            models.Index(fields=["status", "expires_at"]),
            models.Index(fields=["updated_at"]),
        ]

    def __str__(self):
        return f"{self.customer_id} - {self.pack_id} ({self.status})"
