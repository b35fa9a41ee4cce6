"""
Pack catalog domain events.
"""

import uuid
from datetime import datetime

from core.domain.events import DomainEvent


class PackEvent(DomainEvent):
    """Common shape of catalog events."""

    def __init__(self, pack_id: uuid.UUID, sku: str, occurred_at: datetime):
        """
        Initialize a catalog event.

        Args:
            pack_id: Pack UUID
            sku: Pack SKU at the time of the event
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at,
            aggregate_id=str(pack_id),
            event_type=type(self).__name__,
        )
        self.pack_id = pack_id
        self.sku = sku


class PackCreated(PackEvent):
    """Event raised when a pack is added to the catalog."""


class PackUpdated(PackEvent):
    """Event raised when pack attributes change."""


class PackRemoved(PackEvent):
    """Event raised when a pack is soft-deleted."""
