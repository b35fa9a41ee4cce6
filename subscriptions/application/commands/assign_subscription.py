"""
AssignSubscriptionCommand.

Command for an admin to put a customer on a pack immediately.
"""
import uuid
from dataclasses import dataclass


@dataclass
class AssignSubscriptionCommand:
    """Command to assign a pack to a customer."""

    customer_id: uuid.UUID
    pack_id: uuid.UUID
