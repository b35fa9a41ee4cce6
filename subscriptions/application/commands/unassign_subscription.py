"""
UnassignSubscriptionCommand.

Command for an admin to deactivate a specific subscription of a customer.
"""
import uuid
from dataclasses import dataclass


@dataclass
class UnassignSubscriptionCommand:
    """Command to unassign a subscription."""

    customer_id: uuid.UUID
    subscription_id: uuid.UUID
