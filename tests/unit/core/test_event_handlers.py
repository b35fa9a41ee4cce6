"""
Unit tests for the event bus and the built-in event handlers.
"""
import logging
import uuid
from datetime import datetime, timezone

import pytest

from core.domain.events import EventHandler
from core.infrastructure.event_handlers import (
    PACK_EVENTS,
    SUBSCRIPTION_EVENTS,
    AuditLogEventHandler,
    MetricsEventHandler,
    register_event_handlers,
)
from core.infrastructure.events import InMemoryEventBus
from core.metrics import packs_changed_total, subscriptions_requested_total
from packs.domain.events import PackCreated
from subscriptions.domain.events import SubscriptionActivated, SubscriptionRequested

NOW = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


def _requested():
    return SubscriptionRequested(
        subscription_id=uuid.uuid4(),
        customer_id=uuid.uuid4(),
        pack_id=uuid.uuid4(),
        occurred_at=NOW,
    )


class _Collector(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


class _Exploding(EventHandler):
    async def handle(self, event):
        raise RuntimeError("boom")


class TestDomainEvent:
    """Tests for event serialization."""

    def test_event_type_is_class_name(self):
        """Test event_type is filled in from the class."""
        assert _requested().event_type == "SubscriptionRequested"

    def test_to_dict(self):
        """Test serialized payload carries the event attributes."""
        expires_at = datetime(2025, 1, 31, 12, 0, tzinfo=timezone.utc)
        event = SubscriptionActivated(
            subscription_id=uuid.uuid4(),
            customer_id=uuid.uuid4(),
            pack_id=uuid.uuid4(),
            occurred_at=NOW,
            expires_at=expires_at,
        )
        data = event.to_dict()
        assert data["event_type"] == "SubscriptionActivated"
        assert data["aggregate_id"] == str(event.subscription_id)
        assert data["occurred_at"] == NOW.isoformat()
        assert data["data"]["customer_id"] == str(event.customer_id)
        assert data["data"]["expires_at"] == expires_at.isoformat()


@pytest.mark.asyncio
class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    async def test_publish_reaches_subscribers(self):
        """Test handlers receive events of their type only."""
        bus = InMemoryEventBus()
        collector = _Collector()
        bus.subscribe(SubscriptionRequested, collector)

        event = _requested()
        await bus.publish(event)
        await bus.publish(PackCreated(pack_id=uuid.uuid4(), sku="basic", occurred_at=NOW))

        assert collector.events == [event]

    async def test_subscribe_ignores_second_handler_of_same_type(self):
        """Test a handler class is registered once per event type."""
        bus = InMemoryEventBus()
        first, second = _Collector(), _Collector()
        bus.subscribe(SubscriptionRequested, first)
        bus.subscribe(SubscriptionRequested, second)

        await bus.publish(_requested())

        assert len(first.events) == 1
        assert second.events == []

    async def test_failing_handler_does_not_reach_publisher(self):
        """Test a handler error is logged and other handlers still run."""
        bus = InMemoryEventBus()
        collector = _Collector()
        bus.subscribe(SubscriptionRequested, _Exploding())
        bus.subscribe(SubscriptionRequested, collector)

        await bus.publish(_requested())

        assert len(collector.events) == 1

    async def test_unsubscribe(self):
        """Test an unsubscribed handler no longer receives events."""
        bus = InMemoryEventBus()
        collector = _Collector()
        bus.subscribe(SubscriptionRequested, collector)
        bus.unsubscribe(SubscriptionRequested, collector)

        await bus.publish(_requested())

        assert collector.events == []

    async def test_publish_all_keeps_order(self):
        """Test events are delivered in the order given."""
        bus = InMemoryEventBus()
        collector = _Collector()
        bus.subscribe(SubscriptionRequested, collector)
        events = [_requested(), _requested()]

        await bus.publish_all(events)

        assert collector.events == events


@pytest.mark.asyncio
class TestBuiltInHandlers:
    """Tests for audit and metrics handlers."""

    async def test_audit_log(self, caplog):
        """Test the audit handler writes one line with the event data."""
        event = _requested()
        with caplog.at_level(logging.INFO, logger="core.infrastructure.event_handlers"):
            await AuditLogEventHandler().handle(event)

        record = next(r for r in caplog.records if r.getMessage().startswith("Audit log"))
        assert record.event_type == "SubscriptionRequested"
        assert record.data["subscription_id"] == str(event.subscription_id)

    async def test_metrics_subscription_counter(self):
        """Test subscription events bump their counter."""
        before = subscriptions_requested_total._value.get()
        await MetricsEventHandler().handle(_requested())
        assert subscriptions_requested_total._value.get() == before + 1

    async def test_metrics_pack_counter(self):
        """Test pack events bump the labelled catalog counter."""
        counter = packs_changed_total.labels(action="created")
        before = counter._value.get()
        await MetricsEventHandler().handle(
            PackCreated(pack_id=uuid.uuid4(), sku="basic", occurred_at=NOW)
        )
        assert counter._value.get() == before + 1


class TestRegisterEventHandlers:
    """Tests for register_event_handlers."""

    def test_registers_on_every_event(self):
        """Test audit and metrics handlers cover every event type."""
        bus = InMemoryEventBus()
        register_event_handlers(bus)

        for event_type in SUBSCRIPTION_EVENTS + PACK_EVENTS:
            handlers = bus._handlers[event_type]
            assert {type(h) for h in handlers} == {AuditLogEventHandler, MetricsEventHandler}

    def test_registering_twice_does_not_duplicate(self):
        """Test repeated registration keeps one handler of each kind."""
        bus = InMemoryEventBus()
        register_event_handlers(bus)
        register_event_handlers(bus)

        assert len(bus._handlers[SubscriptionRequested]) == 2
