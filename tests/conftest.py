"""
Pytest configuration and shared fixtures.
"""

import asyncio
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
from asgiref.sync import async_to_sync

from core.domain.clock import FixedClock
from core.domain.events import EventHandler
from core.domain.exceptions import CustomerNotFoundError, DuplicateSkuError
from core.domain.value_objects import PageRequest, SortOrder, SubscriptionStatus
from core.infrastructure.event_handlers import PACK_EVENTS, SUBSCRIPTION_EVENTS
from core.infrastructure.events import event_bus
from customers.ports.customer_repository import CustomerRepository
from packs.domain.pack import SubscriptionPack
from packs.ports.pack_repository import PackRepository
from subscriptions.domain.services import LedgerChange
from subscriptions.domain.subscription import Subscription
from subscriptions.ports.subscription_repository import (
    LedgerOperation,
    SubscriptionRepository,
)

# Last day of January, so month arithmetic has to clamp.
START = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)

OPEN_STATUSES = (
    SubscriptionStatus.REQUESTED,
    SubscriptionStatus.APPROVED,
    SubscriptionStatus.ACTIVE,
)


class InMemoryCustomerRepository(CustomerRepository):
    """Customer repository backed by a set of ids."""

    def __init__(self):
        self.ids = set()
        self.deleted = set()

    def add(self, customer_id: Optional[uuid.UUID] = None) -> uuid.UUID:
        customer_id = customer_id or uuid.uuid4()
        self.ids.add(customer_id)
        return customer_id

    def soft_delete(self, customer_id: uuid.UUID) -> None:
        self.ids.discard(customer_id)
        self.deleted.add(customer_id)

    async def exists(self, customer_id: uuid.UUID) -> bool:
        return customer_id in self.ids

    async def count(self) -> int:
        return len(self.ids)


class InMemoryPackRepository(PackRepository):
    """Pack repository backed by a dict."""

    def __init__(self):
        self.packs: Dict[uuid.UUID, SubscriptionPack] = {}

    def add(self, pack: SubscriptionPack) -> SubscriptionPack:
        self.packs[pack.id] = pack
        return pack

    async def save(self, pack: SubscriptionPack) -> SubscriptionPack:
        if not pack.is_deleted:
            for other in self.packs.values():
                if other.id != pack.id and not other.is_deleted and other.sku == pack.sku:
                    raise DuplicateSkuError()
        self.packs[pack.id] = pack
        return pack

    async def find_by_id(
        self, pack_id: uuid.UUID, include_deleted: bool = False
    ) -> Optional[SubscriptionPack]:
        pack = self.packs.get(pack_id)
        if pack is None or (pack.is_deleted and not include_deleted):
            return None
        return pack

    async def find_by_sku(self, sku: str) -> Optional[SubscriptionPack]:
        return next(
            (
                pack
                for pack in self.packs.values()
                if pack.sku.value == sku.strip() and not pack.is_deleted
            ),
            None,
        )

    async def find_by_ids(
        self, pack_ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, SubscriptionPack]:
        return {pack_id: self.packs[pack_id] for pack_id in pack_ids if pack_id in self.packs}

    async def list(
        self, page_request: PageRequest, exclude_deleted: bool = True
    ) -> Tuple[List[SubscriptionPack], int]:
        packs = [p for p in self.packs.values() if not (exclude_deleted and p.is_deleted)]
        packs.sort(key=lambda p: (p.created_at, str(p.id)), reverse=True)
        return packs[page_request.offset : page_request.offset + page_request.limit], len(packs)


class InMemorySubscriptionRepository(SubscriptionRepository):
    """
    Subscription repository backed by a dict.

    ``apply_for_customer`` holds a per-customer asyncio.Lock and yields to
    the event loop between reading and writing, so unserialized callers
    would interleave.
    """

    def __init__(self, customers: InMemoryCustomerRepository, packs: InMemoryPackRepository):
        self.customers = customers
        self.packs = packs
        self.records: Dict[uuid.UUID, Subscription] = {}
        self.locks: Dict[uuid.UUID, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.fail_for: set = set()

    def add(self, subscription: Subscription) -> Subscription:
        self.records[subscription.id] = subscription
        return subscription

    def for_customer(self, customer_id: uuid.UUID) -> List[Subscription]:
        return [r for r in self.records.values() if r.customer_id == customer_id]

    async def apply_for_customer(
        self,
        customer_id: uuid.UUID,
        operation: LedgerOperation,
        include_deleted_customer: bool = False,
    ) -> LedgerChange:
        known = self.customers.ids
        if include_deleted_customer:
            known = known | self.customers.deleted
        if customer_id not in known:
            raise CustomerNotFoundError()
        async with self.locks[customer_id]:
            open_records = [
                r for r in self.for_customer(customer_id) if r.status in OPEN_STATUSES
            ]
            await asyncio.sleep(0)
            change = operation(open_records)
            for record in change.records:
                if record.id in self.fail_for:
                    raise RuntimeError(f"storage failure for {record.id}")
            for record in change.records:
                self.records[record.id] = record
            return change

    async def save(self, subscription: Subscription) -> Subscription:
        self.records[subscription.id] = subscription
        return subscription

    async def find_by_id(self, subscription_id: uuid.UUID) -> Optional[Subscription]:
        return self.records.get(subscription_id)

    async def find_active_by_customer(self, customer_id: uuid.UUID) -> Optional[Subscription]:
        active = [r for r in self.for_customer(customer_id) if r.is_active]
        return max(active, key=lambda r: r.assigned_at) if active else None

    async def list_by_customer(
        self,
        customer_id: uuid.UUID,
        page_request: PageRequest,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Tuple[List[Subscription], int]:
        records = sorted(
            self.for_customer(customer_id),
            key=lambda r: (r.assigned_at or r.created_at, r.created_at, str(r.id)),
            reverse=sort_order == SortOrder.DESC,
        )
        return records[page_request.offset : page_request.offset + page_request.limit], len(records)

    async def list_all(
        self,
        page_request: PageRequest,
        status: Optional[SubscriptionStatus] = None,
    ) -> Tuple[List[Subscription], int]:
        records = [r for r in self.records.values() if status is None or r.status == status]
        records.sort(key=lambda r: (r.created_at, str(r.id)), reverse=True)
        return records[page_request.offset : page_request.offset + page_request.limit], len(records)

    async def find_overdue(self, now: datetime, limit: int) -> List[Subscription]:
        overdue = [r for r in self.records.values() if r.is_overdue(now)]
        overdue.sort(key=lambda r: r.expires_at)
        return overdue[:limit]

    async def count_by_status(self) -> Dict[SubscriptionStatus, int]:
        counts = {status: 0 for status in SubscriptionStatus}
        for record in self.records.values():
            counts[record.status] += 1
        return counts

    async def total_active_revenue(self) -> Decimal:
        total = sum(
            (self.packs.packs[r.pack_id].price.amount for r in self.records.values() if r.is_active),
            Decimal("0.00"),
        )
        return total.quantize(Decimal("0.01"))

    async def find_recently_updated(self, limit: int) -> List[Subscription]:
        records = sorted(
            self.records.values(), key=lambda r: (r.updated_at, str(r.id)), reverse=True
        )
        return records[:limit]


class RecordingEventHandler(EventHandler):
    """Collects every event it receives."""

    def __init__(self):
        self.events = []

    async def handle(self, event) -> None:
        self.events.append(event)

    def types(self) -> List[str]:
        return [event.event_type for event in self.events]


def make_pack(
    sku: str = "premium-plan",
    validity_months: int = 12,
    price: str = "99.99",
    now: datetime = START,
    name: Optional[str] = None,
) -> SubscriptionPack:
    """Build a pack entity."""
    return SubscriptionPack.create(
        name=name or sku.replace("-", " ").title(),
        description=f"{sku} pack",
        sku=sku,
        price=Decimal(price),
        validity_months=validity_months,
        now=now,
    )


# In-memory fixtures


@pytest.fixture
def clock():
    """Fixture for a clock frozen at the end of January 2024."""
    return FixedClock(START)


@pytest.fixture
def pack_factory():
    """Fixture returning the pack builder."""
    return make_pack


@pytest.fixture
def customers():
    """Fixture for an in-memory CustomerRepository."""
    return InMemoryCustomerRepository()


@pytest.fixture
def packs():
    """Fixture for an in-memory PackRepository."""
    return InMemoryPackRepository()


@pytest.fixture
def subscriptions(customers, packs):
    """Fixture for an in-memory SubscriptionRepository."""
    return InMemorySubscriptionRepository(customers, packs)


@pytest.fixture
def customer_id(customers):
    """Fixture for a known customer id."""
    return customers.add()


@pytest.fixture
def premium_pack(packs):
    """Fixture for a 12-month pack in the catalog."""
    return packs.add(make_pack("premium-plan", validity_months=12, price="99.99"))


@pytest.fixture
def basic_pack(packs):
    """Fixture for a 1-month pack in the catalog."""
    return packs.add(make_pack("basic-plan", validity_months=1, price="9.99"))


@pytest.fixture
def recorded_events():
    """Fixture subscribing a recording handler to every domain event."""
    handler = RecordingEventHandler()
    for event_type in SUBSCRIPTION_EVENTS + PACK_EVENTS:
        event_bus.subscribe(event_type, handler)
    yield handler
    for event_type in SUBSCRIPTION_EVENTS + PACK_EVENTS:
        event_bus.unsubscribe(event_type, handler)


# Django fixtures


@pytest.fixture
def customer_repository():
    """Fixture for DjangoCustomerRepository."""
    from customers.infrastructure.repositories.django_customer_repository import (
        DjangoCustomerRepository,
    )

    return DjangoCustomerRepository()


@pytest.fixture
def pack_repository():
    """Fixture for DjangoPackRepository."""
    from packs.infrastructure.repositories.django_pack_repository import DjangoPackRepository

    return DjangoPackRepository()


@pytest.fixture
def subscription_repository():
    """Fixture for DjangoSubscriptionRepository."""
    from subscriptions.infrastructure.repositories.django_subscription_repository import (
        DjangoSubscriptionRepository,
    )

    return DjangoSubscriptionRepository()


@pytest.fixture
def db_customer(db):
    """Fixture for a Customer saved in database."""
    from customers.infrastructure.models import Customer

    unique_id = uuid.uuid4().hex[:8]
    return Customer.objects.create(identity_id=f"identity-{unique_id}", name=f"Customer {unique_id}")


@pytest.fixture
def other_db_customer(db):
    """Fixture for a second Customer saved in database."""
    from customers.infrastructure.models import Customer

    unique_id = uuid.uuid4().hex[:8]
    return Customer.objects.create(identity_id=f"identity-{unique_id}", name=f"Customer {unique_id}")


@pytest.fixture
def db_pack(db, pack_repository):
    """Fixture for a 12-month pack saved in database."""
    return async_to_sync(pack_repository.save)(make_pack("premium-plan", validity_months=12))


@pytest.fixture
def db_basic_pack(db, pack_repository):
    """Fixture for a 1-month pack saved in database."""
    return async_to_sync(pack_repository.save)(
        make_pack("basic-plan", validity_months=1, price="9.99")
    )


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client):
    """Fixture for an API client authenticated as an admin."""
    api_client.credentials(HTTP_X_PRINCIPAL_ROLE="admin")
    return api_client


@pytest.fixture
def customer_client(db_customer):
    """Fixture for an API client authenticated as ``db_customer``."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.credentials(HTTP_X_PRINCIPAL_ROLE="customer", HTTP_X_CUSTOMER_ID=str(db_customer.id))
    return client
