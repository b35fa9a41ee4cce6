"""
Subscription domain events.

Domain events represent something that happened in the subscription ledger.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from core.domain.events import DomainEvent
from core.domain.value_objects import SubscriptionStatus


class SubscriptionEvent(DomainEvent):
    """Common shape of ledger events."""

    def __init__(
        self,
        subscription_id: uuid.UUID,
        customer_id: uuid.UUID,
        pack_id: uuid.UUID,
        occurred_at: datetime,
        expires_at: Optional[datetime] = None,
    ):
        """
        Initialize a ledger event.

        Args:
            subscription_id: Subscription UUID
            customer_id: Owning customer UUID
            pack_id: Pack UUID
            occurred_at: When the transition happened
            expires_at: Expiry moment, for activations
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at,
            aggregate_id=str(subscription_id),
            event_type=type(self).__name__,
        )
        self.subscription_id = subscription_id
        self.customer_id = customer_id
        self.pack_id = pack_id
        self.expires_at = expires_at


class SubscriptionRequested(SubscriptionEvent):
    """Event raised when a customer requests a pack."""


class SubscriptionApproved(SubscriptionEvent):
    """Event raised when a request is approved without activation."""


class SubscriptionActivated(SubscriptionEvent):
    """Event raised when a subscription becomes ACTIVE."""


class SubscriptionDeactivated(SubscriptionEvent):
    """Event raised when an ACTIVE subscription becomes INACTIVE."""


class SubscriptionExpired(SubscriptionEvent):
    """Event raised when the expiry sweep moves a subscription to EXPIRED."""


_EVENT_BY_STATUS = {
    SubscriptionStatus.REQUESTED: SubscriptionRequested,
    SubscriptionStatus.APPROVED: SubscriptionApproved,
    SubscriptionStatus.ACTIVE: SubscriptionActivated,
    SubscriptionStatus.INACTIVE: SubscriptionDeactivated,
    SubscriptionStatus.EXPIRED: SubscriptionExpired,
}


def events_for(change) -> List[SubscriptionEvent]:
    """
    Build the events describing a committed LedgerChange.

    Args:
        change: LedgerChange returned by the repository

    Returns:
        One event per persisted record, in persistence order
    """
    events = []
    for record in change.records:
        event_class = _EVENT_BY_STATUS[record.status]
        events.append(
            event_class(
                subscription_id=record.id,
                customer_id=record.customer_id,
                pack_id=record.pack_id,
                occurred_at=record.updated_at,
                expires_at=record.expires_at if record.is_active else None,
            )
        )
    return events
