"""
Event handlers for domain events.

These handlers process domain events after the change that raised them
has been committed: audit logging and Prometheus counters.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from core.metrics import (
    packs_changed_total,
    subscriptions_activated_total,
    subscriptions_approved_total,
    subscriptions_deactivated_total,
    subscriptions_expired_total,
    subscriptions_requested_total,
)
from packs.domain.events import PackCreated, PackRemoved, PackUpdated
from subscriptions.domain.events import (
    SubscriptionActivated,
    SubscriptionApproved,
    SubscriptionDeactivated,
    SubscriptionExpired,
    SubscriptionRequested,
)

logger = logging.getLogger(__name__)

SUBSCRIPTION_EVENTS = (
    SubscriptionRequested,
    SubscriptionApproved,
    SubscriptionActivated,
    SubscriptionDeactivated,
    SubscriptionExpired,
)

PACK_EVENTS = (PackCreated, PackUpdated, PackRemoved)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one structured log line per domain event.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        serialized = event.to_dict()
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": serialized["event_id"],
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": serialized["occurred_at"],
                "data": serialized["data"],
            },
        )


class MetricsEventHandler(EventHandler):
    """
    Event handler for business metrics.

    Bumps the Prometheus counter matching each event.
    """

    _COUNTERS = {
        SubscriptionRequested: subscriptions_requested_total,
        SubscriptionApproved: subscriptions_approved_total,
        SubscriptionActivated: subscriptions_activated_total,
        SubscriptionDeactivated: subscriptions_deactivated_total,
        SubscriptionExpired: subscriptions_expired_total,
    }

    _PACK_ACTIONS = {
        PackCreated: "created",
        PackUpdated: "updated",
        PackRemoved: "removed",
    }

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        counter = self._COUNTERS.get(type(event))
        if counter is not None:
            counter.inc()
            return

        action = self._PACK_ACTIONS.get(type(event))
        if action is not None:
            packs_changed_total.labels(action=action).inc()


def register_event_handlers(bus=None):
    """
    Register all event handlers with the event bus.

    Args:
        bus: Event bus to register on (defaults to the global bus)
    """
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    audit_handler = AuditLogEventHandler()
    metrics_handler = MetricsEventHandler()

    for event_type in SUBSCRIPTION_EVENTS + PACK_EVENTS:
        bus.subscribe(event_type, audit_handler)
        bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
