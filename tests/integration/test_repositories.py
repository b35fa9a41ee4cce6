"""
Integration tests for repository implementations.
"""
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from asgiref.sync import async_to_sync

from core.domain.exceptions import (
    ActiveSubscriptionExistsError,
    CustomerNotFoundError,
    DuplicateSkuError,
)
from core.domain.value_objects import PageRequest, SortOrder, SubscriptionStatus
from subscriptions.domain.services import LedgerChange, SubscriptionLedger
from subscriptions.domain.subscription import Subscription


@pytest.mark.django_db
@pytest.mark.integration
class TestPackRepository:
    """Integration tests for DjangoPackRepository."""

    def test_save_and_find(self, pack_repository, db_pack):
        """Test saving a pack and loading it back."""
        found = async_to_sync(pack_repository.find_by_id)(db_pack.id)

        assert found is not None
        assert found.sku == db_pack.sku
        assert found.price.amount == Decimal("99.99")
        assert found.validity_months == 12

    def test_find_by_sku(self, pack_repository, db_pack):
        """Test SKU lookup."""
        found = async_to_sync(pack_repository.find_by_sku)("premium-plan")
        assert found.id == db_pack.id
        assert async_to_sync(pack_repository.find_by_sku)("missing") is None

    def test_duplicate_sku(self, pack_repository, pack_factory, db_pack):
        """Test the unique index turns into DuplicateSkuError."""
        with pytest.raises(DuplicateSkuError):
            async_to_sync(pack_repository.save)(pack_factory("premium-plan"))

    def test_removed_pack(self, pack_repository, pack_factory, db_pack, clock):
        """Test a removed pack is hidden but still loadable, and frees its SKU."""
        async_to_sync(pack_repository.save)(db_pack.remove(clock.now()))

        assert async_to_sync(pack_repository.find_by_id)(db_pack.id) is None
        assert async_to_sync(pack_repository.find_by_sku)("premium-plan") is None
        removed = async_to_sync(pack_repository.find_by_id)(db_pack.id, include_deleted=True)
        assert removed.is_deleted

        replacement = async_to_sync(pack_repository.save)(pack_factory("premium-plan"))
        assert replacement.id != db_pack.id
        assert db_pack.id in async_to_sync(pack_repository.find_by_ids)([db_pack.id])

    def test_list(self, pack_repository, pack_factory, clock, db):
        """Test listing is newest first and paginated."""
        for index in range(3):
            async_to_sync(pack_repository.save)(
                pack_factory(f"pack-{index}", now=clock.advance(minutes=1))
            )

        packs, total = async_to_sync(pack_repository.list)(PageRequest(page=1, limit=2))

        assert total == 3
        assert [p.sku.value for p in packs] == ["pack-2", "pack-1"]


@pytest.mark.django_db
@pytest.mark.integration
class TestCustomerRepository:
    """Integration tests for DjangoCustomerRepository."""

    def test_exists_and_count(self, customer_repository, db_customer, other_db_customer):
        """Test existence checks and counting skip deleted customers."""
        assert async_to_sync(customer_repository.exists)(db_customer.id)
        assert not async_to_sync(customer_repository.exists)(uuid.uuid4())
        assert async_to_sync(customer_repository.count)() == 2

        other_db_customer.deleted_at = other_db_customer.created_at
        other_db_customer.save()

        assert not async_to_sync(customer_repository.exists)(other_db_customer.id)
        assert async_to_sync(customer_repository.count)() == 1


@pytest.mark.django_db
@pytest.mark.integration
class TestSubscriptionRepository:
    """Integration tests for DjangoSubscriptionRepository."""

    def _apply(self, repository, customer_id, operation):
        return async_to_sync(repository.apply_for_customer)(customer_id, operation)

    def test_apply_persists_change(self, subscription_repository, db_customer, db_pack, clock):
        """Test a ledger operation is persisted and readable."""
        change = self._apply(
            subscription_repository,
            db_customer.id,
            lambda records: SubscriptionLedger.assign(records, db_customer.id, db_pack, clock.now()),
        )

        found = async_to_sync(subscription_repository.find_by_id)(change.subscription.id)
        assert found.status == SubscriptionStatus.ACTIVE
        assert found.expires_at == db_pack.expires_from(clock.now())
        active = async_to_sync(subscription_repository.find_active_by_customer)(db_customer.id)
        assert active.id == found.id

    def test_apply_passes_open_records_only(self, subscription_repository, db_customer, db_pack, clock):
        """Test the operation sees REQUESTED, APPROVED and ACTIVE records only."""
        now = clock.now()
        closed = Subscription.assign(db_customer.id, db_pack, now).deactivate(now)
        pending = Subscription.request(db_customer.id, db_pack.id, now)
        async_to_sync(subscription_repository.save)(closed)
        async_to_sync(subscription_repository.save)(pending)
        seen = []

        def operation(records):
            seen.extend(records)
            return LedgerChange(subscription=None, changed=False)

        self._apply(subscription_repository, db_customer.id, operation)

        assert [record.id for record in seen] == [pending.id]

    def test_apply_unknown_customer(self, subscription_repository):
        """Test the customer must exist."""
        with pytest.raises(CustomerNotFoundError):
            self._apply(
                subscription_repository,
                uuid.uuid4(),
                lambda records: LedgerChange(subscription=None, changed=False),
            )

    def test_apply_deleted_customer(self, subscription_repository, db_customer, db_basic_pack, clock):
        """Test a soft-deleted customer is locked only when explicitly included."""
        record = async_to_sync(subscription_repository.save)(
            Subscription.assign(db_customer.id, db_basic_pack, clock.now())
        )
        db_customer.deleted_at = db_customer.created_at
        db_customer.save()
        later = record.expires_at + timedelta(hours=1)

        def expire(records):
            return SubscriptionLedger.expire(records, record.id, later)

        with pytest.raises(CustomerNotFoundError):
            self._apply(subscription_repository, db_customer.id, expire)

        change = async_to_sync(subscription_repository.apply_for_customer)(
            db_customer.id, expire, include_deleted_customer=True
        )

        assert change.changed
        found = async_to_sync(subscription_repository.find_by_id)(record.id)
        assert found.status == SubscriptionStatus.EXPIRED

    def test_failed_operation_writes_nothing(self, subscription_repository, db_customer, db_pack, clock):
        """Test a rejected transition leaves storage untouched."""
        self._apply(
            subscription_repository,
            db_customer.id,
            lambda records: SubscriptionLedger.assign(records, db_customer.id, db_pack, clock.now()),
        )

        with pytest.raises(ActiveSubscriptionExistsError):
            self._apply(
                subscription_repository,
                db_customer.id,
                lambda records: SubscriptionLedger.request(
                    records, db_customer.id, db_pack, clock.now()
                ),
            )

        _, total = async_to_sync(subscription_repository.list_by_customer)(
            db_customer.id, PageRequest()
        )
        assert total == 1

    def test_history_ordering(self, subscription_repository, db_customer, db_pack, clock):
        """Test history orders by assigned_at, falling back to created_at."""
        start = clock.now()
        assigned = Subscription.assign(db_customer.id, db_pack, start + timedelta(days=2))
        early_request = Subscription.request(db_customer.id, db_pack.id, start + timedelta(days=1))
        late_request = Subscription.request(db_customer.id, db_pack.id, start + timedelta(days=3))
        for record in (assigned, early_request, late_request):
            async_to_sync(subscription_repository.save)(record)

        desc, total = async_to_sync(subscription_repository.list_by_customer)(
            db_customer.id, PageRequest()
        )
        asc, _ = async_to_sync(subscription_repository.list_by_customer)(
            db_customer.id, PageRequest(), sort_order=SortOrder.ASC
        )

        assert total == 3
        assert [r.id for r in desc] == [late_request.id, assigned.id, early_request.id]
        assert [r.id for r in asc] == [early_request.id, assigned.id, late_request.id]

    def test_find_overdue(self, subscription_repository, db_customer, other_db_customer, db_pack, db_basic_pack, clock):
        """Test only ACTIVE records past expires_at are returned."""
        now = clock.now()
        short = Subscription.assign(db_customer.id, db_basic_pack, now)
        long = Subscription.assign(other_db_customer.id, db_pack, now)
        async_to_sync(subscription_repository.save)(short)
        async_to_sync(subscription_repository.save)(long)

        overdue = async_to_sync(subscription_repository.find_overdue)(now + timedelta(days=40), 10)

        assert [r.id for r in overdue] == [short.id]

    def test_admin_aggregates(self, subscription_repository, db_customer, other_db_customer, db_pack, db_basic_pack, clock):
        """Test status counts, revenue and recent updates."""
        now = clock.now()
        async_to_sync(subscription_repository.save)(Subscription.assign(db_customer.id, db_pack, now))
        async_to_sync(subscription_repository.save)(
            Subscription.assign(other_db_customer.id, db_basic_pack, now)
        )
        latest = Subscription.request(db_customer.id, db_basic_pack.id, now + timedelta(minutes=1))
        async_to_sync(subscription_repository.save)(latest)

        counts = async_to_sync(subscription_repository.count_by_status)()
        revenue = async_to_sync(subscription_repository.total_active_revenue)()
        recent = async_to_sync(subscription_repository.find_recently_updated)(1)
        _, total = async_to_sync(subscription_repository.list_all)(
            PageRequest(), status=SubscriptionStatus.ACTIVE
        )

        assert counts[SubscriptionStatus.ACTIVE] == 2
        assert counts[SubscriptionStatus.REQUESTED] == 1
        assert counts[SubscriptionStatus.EXPIRED] == 0
        assert revenue == Decimal("109.98")
        assert [r.id for r in recent] == [latest.id]
        assert total == 2
