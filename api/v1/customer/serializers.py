"""
Serializers for Customer API endpoints.
"""

from rest_framework import serializers

from api.v1.serializers import PaginationQuerySerializer, PaginationSerializer
from core.domain.value_objects import MAX_SKU_LENGTH, SortOrder


class RequestSubscriptionRequestSerializer(serializers.Serializer):
    """Serializer for request subscription request."""

    sku = serializers.CharField(max_length=MAX_SKU_LENGTH)


class RequestedSubscriptionSerializer(serializers.Serializer):
    """Serializer for RequestedSubscriptionDTO."""

    id = serializers.UUIDField()
    status = serializers.CharField()
    requested_at = serializers.DateTimeField()


class PackSummarySerializer(serializers.Serializer):
    """Serializer for PackSummaryDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    sku = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    validity_months = serializers.IntegerField()


class CurrentSubscriptionSerializer(serializers.Serializer):
    """Serializer for CurrentSubscriptionDTO."""

    id = serializers.UUIDField()
    pack = PackSummarySerializer()
    status = serializers.CharField()
    assigned_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    is_valid = serializers.BooleanField()


class DeactivationSerializer(serializers.Serializer):
    """Serializer for DeactivationDTO."""

    id = serializers.UUIDField()
    deactivated_at = serializers.DateTimeField()


class SubscriptionHistoryQuerySerializer(PaginationQuerySerializer):
    """Serializer for history query parameters."""

    sort = serializers.ChoiceField(
        choices=[order.value for order in SortOrder],
        required=False,
        default=SortOrder.DESC.value,
    )


class SubscriptionHistoryItemSerializer(serializers.Serializer):
    """Serializer for SubscriptionHistoryItemDTO."""

    id = serializers.UUIDField()
    pack_id = serializers.UUIDField()
    pack_name = serializers.CharField()
    pack_sku = serializers.CharField()
    status = serializers.CharField()
    requested_at = serializers.DateTimeField()
    approved_at = serializers.DateTimeField(allow_null=True)
    assigned_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    deactivated_at = serializers.DateTimeField(allow_null=True)


class SubscriptionHistorySerializer(serializers.Serializer):
    """Serializer for SubscriptionHistoryDTO."""

    subscriptions = SubscriptionHistoryItemSerializer(many=True)
    pagination = PaginationSerializer()
