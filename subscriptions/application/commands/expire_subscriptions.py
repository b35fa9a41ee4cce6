"""
ExpireSubscriptionsCommand.

Command to move overdue ACTIVE subscriptions to EXPIRED.
"""
from dataclasses import dataclass


@dataclass
class ExpireSubscriptionsCommand:
    """Command to run one expiry sweep."""

    batch_size: int = 500
    dry_run: bool = False
