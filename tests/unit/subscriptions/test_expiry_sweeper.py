"""
Unit tests for ExpireSubscriptionsHandler.
"""
from datetime import timedelta

import pytest

from core.domain.exceptions import CustomerNotFoundError, NoActiveSubscriptionError
from core.domain.value_objects import SubscriptionStatus
from subscriptions.application.commands.expire_subscriptions import ExpireSubscriptionsCommand
from subscriptions.application.handlers.expire_subscriptions_handler import (
    ExpireSubscriptionsHandler,
)
from subscriptions.application.handlers.subscription_query_handlers import (
    GetCurrentSubscriptionHandler,
)
from subscriptions.application.queries.get_current_subscription import (
    GetCurrentSubscriptionQuery,
)
from subscriptions.domain.services import SubscriptionLedger
from subscriptions.domain.subscription import Subscription


@pytest.fixture
def overdue(subscriptions, customers, basic_pack, clock):
    """Three ACTIVE one-month subscriptions for different customers, all overdue."""
    records = [
        subscriptions.add(Subscription.assign(customers.add(), basic_pack, clock.now()))
        for _ in range(3)
    ]
    clock.advance(days=40)
    return records


@pytest.mark.asyncio
class TestExpireSubscriptionsHandler:
    """Tests for ExpireSubscriptionsHandler."""

    async def test_expires_overdue(self, subscriptions, clock, overdue, recorded_events):
        """Test every overdue ACTIVE record becomes EXPIRED."""
        handler = ExpireSubscriptionsHandler(subscriptions, clock)

        result = await handler.handle(ExpireSubscriptionsCommand())

        assert result.checked == 3
        assert result.expired == 3
        assert result.failed == []
        assert all(
            subscriptions.records[r.id].status == SubscriptionStatus.EXPIRED for r in overdue
        )
        assert recorded_events.types() == ["SubscriptionExpired"] * 3

    async def test_idempotent(self, subscriptions, clock, overdue):
        """Test a second run finds nothing to do."""
        handler = ExpireSubscriptionsHandler(subscriptions, clock)
        await handler.handle(ExpireSubscriptionsCommand())

        result = await handler.handle(ExpireSubscriptionsCommand())

        assert result.checked == 0
        assert result.expired == 0

    async def test_leaves_current_and_closed_records(self, subscriptions, customers, basic_pack, premium_pack, clock):
        """Test records inside their window and INACTIVE records are untouched."""
        start = clock.now()
        current = subscriptions.add(Subscription.assign(customers.add(), premium_pack, start))
        inactive = subscriptions.add(
            Subscription.assign(customers.add(), basic_pack, start).deactivate(start)
        )
        clock.advance(days=40)

        result = await ExpireSubscriptionsHandler(subscriptions, clock).handle(
            ExpireSubscriptionsCommand()
        )

        assert result.expired == 0
        assert subscriptions.records[current.id].status == SubscriptionStatus.ACTIVE
        assert subscriptions.records[inactive.id].status == SubscriptionStatus.INACTIVE

    async def test_small_batches(self, subscriptions, clock, overdue):
        """Test the sweep keeps fetching until a short batch comes back."""
        result = await ExpireSubscriptionsHandler(subscriptions, clock).handle(
            ExpireSubscriptionsCommand(batch_size=2)
        )

        assert result.expired == 3

    async def test_dry_run(self, subscriptions, clock, overdue):
        """Test a dry run reports without changing anything."""
        result = await ExpireSubscriptionsHandler(subscriptions, clock).handle(
            ExpireSubscriptionsCommand(dry_run=True)
        )

        assert result.dry_run
        assert result.checked == 3
        assert result.expired == 0
        assert all(subscriptions.records[r.id].is_active for r in overdue)

    async def test_failure_does_not_stop_sweep(self, subscriptions, clock, overdue):
        """Test a failing record is reported and the others still expire."""
        subscriptions.fail_for.add(overdue[0].id)

        result = await ExpireSubscriptionsHandler(subscriptions, clock).handle(
            ExpireSubscriptionsCommand(batch_size=1)
        )

        assert result.failed == [overdue[0].id]
        assert result.expired == 2
        assert subscriptions.records[overdue[0].id].is_active

    async def test_deactivated_after_pickup_is_skipped(self, subscriptions, clock, overdue):
        """Test a record deactivated between pickup and update stays INACTIVE."""
        target = overdue[0]
        original_find = subscriptions.find_overdue

        async def find_then_deactivate(now, limit):
            batch = await original_find(now, limit)
            current = subscriptions.records[target.id]
            if current.is_active:
                subscriptions.records[target.id] = current.deactivate(now - timedelta(hours=1))
            return batch

        subscriptions.find_overdue = find_then_deactivate

        result = await ExpireSubscriptionsHandler(subscriptions, clock).handle(
            ExpireSubscriptionsCommand()
        )

        assert result.skipped == 1
        assert result.expired == 2
        assert subscriptions.records[target.id].status == SubscriptionStatus.INACTIVE

    async def test_expired_record_is_no_longer_current(self, subscriptions, packs, customers, clock, overdue):
        """Test the customer has no current subscription once the sweep ran."""
        customer_id = overdue[0].customer_id
        await ExpireSubscriptionsHandler(subscriptions, clock).handle(ExpireSubscriptionsCommand())

        handler = GetCurrentSubscriptionHandler(subscriptions, packs, customers, clock)

        with pytest.raises(NoActiveSubscriptionError):
            await handler.handle(GetCurrentSubscriptionQuery(customer_id=customer_id))

    async def test_expires_records_of_deleted_customer(self, subscriptions, customers, clock, overdue):
        """Test a soft-deleted customer's overdue record is still expired."""
        target = overdue[0]
        customers.soft_delete(target.customer_id)

        result = await ExpireSubscriptionsHandler(subscriptions, clock).handle(
            ExpireSubscriptionsCommand()
        )

        assert result.failed == []
        assert result.expired == 3
        assert subscriptions.records[target.id].status == SubscriptionStatus.EXPIRED

    async def test_deleted_customer_rejected_outside_sweep(self, subscriptions, customers, clock, overdue):
        """Test other transitions still treat a soft-deleted customer as unknown."""
        target = overdue[0]
        customers.soft_delete(target.customer_id)

        with pytest.raises(CustomerNotFoundError):
            await subscriptions.apply_for_customer(
                target.customer_id,
                lambda records: SubscriptionLedger.deactivate(records, clock.now()),
            )

        assert subscriptions.records[target.id].is_active
