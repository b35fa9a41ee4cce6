"""
Serializers shared by the admin and customer APIs.
"""

from django.conf import settings
from rest_framework import serializers

from core.domain.value_objects import MAX_PAGE_SIZE


def _max_page_size() -> int:
    return min(settings.SUBSCRIPTION_MAX_PAGE_SIZE, MAX_PAGE_SIZE)


class PaginationQuerySerializer(serializers.Serializer):
    """Serializer for ``page`` and ``limit`` query parameters."""

    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1)

    def validate_limit(self, value):
        """Cap limit at the configured maximum page size."""
        if value > _max_page_size():
            raise serializers.ValidationError(f"Limit must be at most {_max_page_size()}")
        return value

    def validate(self, attrs):
        """Fill in the configured default page size."""
        attrs.setdefault("limit", settings.SUBSCRIPTION_DEFAULT_PAGE_SIZE)
        return attrs


class PaginationSerializer(serializers.Serializer):
    """Serializer for PaginationDTO."""

    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total = serializers.IntegerField()
    pages = serializers.IntegerField()


class PackSerializer(serializers.Serializer):
    """Serializer for PackDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField()
    sku = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    validity_months = serializers.IntegerField()
    state = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    deleted_at = serializers.DateTimeField(allow_null=True)


class PackListSerializer(serializers.Serializer):
    """Serializer for PackListDTO."""

    packs = PackSerializer(many=True)
    pagination = PaginationSerializer()
