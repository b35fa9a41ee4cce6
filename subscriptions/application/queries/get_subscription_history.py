"""
GetSubscriptionHistoryQuery.

Query to page through every subscription a customer has had.
"""
import uuid
from dataclasses import dataclass, field

from core.domain.value_objects import DEFAULT_PAGE_SIZE, SortOrder


@dataclass
class GetSubscriptionHistoryQuery:
    """Query to get subscription history."""

    customer_id: uuid.UUID
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_order: SortOrder = field(default=SortOrder.DESC)
