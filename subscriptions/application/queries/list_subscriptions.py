"""
ListSubscriptionsQuery.

Admin query over all subscriptions, newest first.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import DEFAULT_PAGE_SIZE, SubscriptionStatus


@dataclass
class ListSubscriptionsQuery:
    """Query to list subscriptions across customers."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    status: Optional[SubscriptionStatus] = None
