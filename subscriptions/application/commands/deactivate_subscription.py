"""
DeactivateSubscriptionCommand.

Command to deactivate whatever subscription a customer has ACTIVE.
"""
import uuid
from dataclasses import dataclass


@dataclass
class DeactivateSubscriptionCommand:
    """Command to deactivate the customer's current subscription."""

    customer_id: uuid.UUID
