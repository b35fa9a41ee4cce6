"""
Customer model.

Customers are owned by the customer management system; this table only
mirrors what subscriptions need: identity, display name and whether the
customer still exists.
"""
import uuid

from django.db import models
from django.utils import timezone


class Customer(models.Model):
    """
    A customer linked to exactly one identity record.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    identity_id = models.CharField(
        max_length=255, unique=True, help_text="Identifier issued by the identity provider"
    )
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["deleted_at"]),
        ]

    def __str__(self):
        return self.name

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
