"""
ApproveSubscriptionCommand.

Command for an admin to approve a REQUESTED subscription.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ApproveSubscriptionCommand:
    """Command to approve a subscription request."""

    subscription_id: uuid.UUID
