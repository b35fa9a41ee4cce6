"""
Serializers for Admin API endpoints.
"""

from rest_framework import serializers

from api.v1.serializers import PaginationQuerySerializer, PaginationSerializer
from core.domain.value_objects import (
    MAX_SKU_LENGTH,
    MAX_VALIDITY_MONTHS,
    MIN_VALIDITY_MONTHS,
    SubscriptionStatus,
)


class CreatePackRequestSerializer(serializers.Serializer):
    """Serializer for create pack request."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField()
    sku = serializers.CharField(max_length=MAX_SKU_LENGTH)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    validity_months = serializers.IntegerField(
        min_value=MIN_VALIDITY_MONTHS, max_value=MAX_VALIDITY_MONTHS
    )


class UpdatePackRequestSerializer(CreatePackRequestSerializer):
    """Serializer for update pack request. Every field is optional."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)

    def validate(self, attrs):
        """Require at least one field."""
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to update")
        return attrs


class ListPacksQuerySerializer(PaginationQuerySerializer):
    """Serializer for list packs query parameters."""

    include_deleted = serializers.BooleanField(required=False, default=False)


class ListSubscriptionsQuerySerializer(PaginationQuerySerializer):
    """Serializer for list subscriptions query parameters."""

    status = serializers.ChoiceField(
        choices=[status.value for status in SubscriptionStatus], required=False
    )


class AssignSubscriptionRequestSerializer(serializers.Serializer):
    """Serializer for assign subscription request."""

    pack_id = serializers.UUIDField()


class SubscriptionStatusSerializer(serializers.Serializer):
    """Serializer for SubscriptionStatusDTO."""

    id = serializers.UUIDField()
    customer_id = serializers.UUIDField()
    pack_id = serializers.UUIDField()
    status = serializers.CharField()
    assigned_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    deactivated_at = serializers.DateTimeField(allow_null=True)
    deactivated_ids = serializers.ListField(child=serializers.UUIDField())


class SubscriptionRecordSerializer(serializers.Serializer):
    """Serializer for SubscriptionRecordDTO."""

    id = serializers.UUIDField()
    customer_id = serializers.UUIDField()
    pack_id = serializers.UUIDField()
    pack_name = serializers.CharField()
    pack_sku = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    validity_months = serializers.IntegerField()
    status = serializers.CharField()
    requested_at = serializers.DateTimeField()
    approved_at = serializers.DateTimeField(allow_null=True)
    assigned_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    deactivated_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class SubscriptionListSerializer(serializers.Serializer):
    """Serializer for SubscriptionListDTO."""

    subscriptions = SubscriptionRecordSerializer(many=True)
    pagination = PaginationSerializer()


class RecentActivitySerializer(serializers.Serializer):
    """Serializer for RecentActivityDTO."""

    subscription_id = serializers.UUIDField()
    customer_id = serializers.UUIDField()
    pack_name = serializers.CharField()
    type = serializers.CharField()
    timestamp = serializers.DateTimeField()


class SubscriptionOverviewSerializer(serializers.Serializer):
    """Serializer for SubscriptionOverviewDTO."""

    total_customers = serializers.IntegerField()
    active_subscriptions = serializers.IntegerField()
    pending_requests = serializers.IntegerField()
    approved_awaiting_assignment = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    recent_activities = RecentActivitySerializer(many=True)
