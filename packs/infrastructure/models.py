"""
SubscriptionPack model.
"""
import uuid

from django.db import models
from django.utils import timezone


class SubscriptionPack(models.Model):
    """
    A purchasable plan definition.

    Soft-deleted packs keep their row so historical subscriptions can
    still show name and price.
    """

    STATE_CHOICES = [
        ("active", "Active"),
        ("deleted", "Deleted"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField()
    sku = models.CharField(max_length=100, db_index=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    validity_months = models.PositiveSmallIntegerField(help_text="Validity window, 1 to 12 months")
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default="active")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "subscription_packs"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["sku"],
                condition=models.Q(state="active"),
                name="unique_sku_among_active_packs",
            ),
        ]
        indexes = [
            models.Index(fields=["state", "created_at"]),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    @property
    def is_deleted(self) -> bool:
        return self.state == "deleted"
