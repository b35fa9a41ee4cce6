"""
GetSubscriptionOverviewQuery.

Admin dashboard figures: customers, active and pending subscriptions,
revenue from active subscriptions and recent activity.
"""
from dataclasses import dataclass


@dataclass
class GetSubscriptionOverviewQuery:
    """Query for the subscription overview."""

    recent_limit: int = 10
