"""
GetCurrentSubscriptionQuery.

Query for the customer's ACTIVE subscription and whether it grants access.
"""
import uuid
from dataclasses import dataclass


@dataclass
class GetCurrentSubscriptionQuery:
    """Query to get the current subscription."""

    customer_id: uuid.UUID
