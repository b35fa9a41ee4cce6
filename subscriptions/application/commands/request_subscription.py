"""
RequestSubscriptionCommand.

Command for a customer to ask for a pack by SKU.
"""
import uuid
from dataclasses import dataclass


@dataclass
class RequestSubscriptionCommand:
    """Command to request a subscription."""

    customer_id: uuid.UUID
    sku: str
