"""
Subscription DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from core.application.pagination import PaginationDTO


@dataclass
class RequestedSubscriptionDTO:
    """DTO returned when a subscription is requested."""

    id: uuid.UUID
    status: str
    requested_at: datetime


@dataclass
class SubscriptionStatusDTO:
    """DTO for the outcome of approve, assign and unassign."""

    id: uuid.UUID
    customer_id: uuid.UUID
    pack_id: uuid.UUID
    status: str
    assigned_at: Optional[datetime]
    expires_at: Optional[datetime]
    deactivated_at: Optional[datetime]
    deactivated_ids: List[uuid.UUID] = field(default_factory=list)


@dataclass
class DeactivationDTO:
    """DTO returned when a customer's subscription is deactivated."""

    id: uuid.UUID
    deactivated_at: datetime


@dataclass
class PackSummaryDTO:
    """Pack display fields attached to subscription views."""

    id: uuid.UUID
    name: str
    sku: str
    price: Decimal
    validity_months: int


@dataclass
class CurrentSubscriptionDTO:
    """DTO for the customer's current subscription."""

    id: uuid.UUID
    pack: PackSummaryDTO
    status: str
    assigned_at: datetime
    expires_at: datetime
    is_valid: bool


@dataclass
class SubscriptionHistoryItemDTO:
    """DTO for one entry of a customer's history."""

    id: uuid.UUID
    pack_id: uuid.UUID
    pack_name: str
    pack_sku: str
    status: str
    requested_at: datetime
    approved_at: Optional[datetime]
    assigned_at: Optional[datetime]
    expires_at: Optional[datetime]
    deactivated_at: Optional[datetime]


@dataclass
class SubscriptionHistoryDTO:
    """DTO for a page of history."""

    subscriptions: List[SubscriptionHistoryItemDTO]
    pagination: PaginationDTO


@dataclass
class SubscriptionRecordDTO:
    """DTO for a subscription in the admin listing."""

    id: uuid.UUID
    customer_id: uuid.UUID
    pack_id: uuid.UUID
    pack_name: str
    pack_sku: str
    price: Decimal
    validity_months: int
    status: str
    requested_at: datetime
    approved_at: Optional[datetime]
    assigned_at: Optional[datetime]
    expires_at: Optional[datetime]
    deactivated_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


@dataclass
class SubscriptionListDTO:
    """DTO for a page of the admin listing."""

    subscriptions: List[SubscriptionRecordDTO]
    pagination: PaginationDTO


@dataclass
class RecentActivityDTO:
    """DTO for one dashboard activity line."""

    subscription_id: uuid.UUID
    customer_id: uuid.UUID
    pack_name: str
    type: str
    timestamp: datetime


@dataclass
class SubscriptionOverviewDTO:
    """DTO for the admin overview."""

    total_customers: int
    active_subscriptions: int
    pending_requests: int
    approved_awaiting_assignment: int
    total_revenue: Decimal
    recent_activities: List[RecentActivityDTO]


@dataclass
class ExpirySweepResultDTO:
    """DTO summarising one expiry sweep."""

    as_of: datetime
    checked: int
    expired: int
    skipped: int
    failed: List[uuid.UUID] = field(default_factory=list)
    dry_run: bool = False
