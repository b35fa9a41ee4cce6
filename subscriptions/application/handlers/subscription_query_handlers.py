"""
Subscription query handlers.

Read-side handlers for the customer's current subscription and history,
the admin listing and the admin overview.
"""
import uuid
from typing import Dict, Iterable

from core.application.pagination import PaginationDTO
from core.domain.clock import Clock, system_clock
from core.domain.exceptions import CustomerNotFoundError, NoActiveSubscriptionError
from core.domain.value_objects import PageRequest, SubscriptionStatus
from customers.ports.customer_repository import CustomerRepository
from packs.domain.pack import SubscriptionPack
from packs.ports.pack_repository import PackRepository
from subscriptions.application.dto.subscription_dto import (
    CurrentSubscriptionDTO,
    PackSummaryDTO,
    RecentActivityDTO,
    SubscriptionHistoryDTO,
    SubscriptionHistoryItemDTO,
    SubscriptionListDTO,
    SubscriptionOverviewDTO,
    SubscriptionRecordDTO,
)
from subscriptions.application.queries.get_current_subscription import (
    GetCurrentSubscriptionQuery,
)
from subscriptions.application.queries.get_subscription_history import (
    GetSubscriptionHistoryQuery,
)
from subscriptions.application.queries.get_subscription_overview import (
    GetSubscriptionOverviewQuery,
)
from subscriptions.application.queries.list_subscriptions import ListSubscriptionsQuery
from subscriptions.domain.policy import AccessPolicy
from subscriptions.domain.subscription import Subscription
from subscriptions.ports.subscription_repository import SubscriptionRepository

_ACTIVITY_BY_STATUS = {
    SubscriptionStatus.REQUESTED: "requested",
    SubscriptionStatus.APPROVED: "approved",
    SubscriptionStatus.ACTIVE: "activated",
    SubscriptionStatus.INACTIVE: "deactivated",
    SubscriptionStatus.EXPIRED: "expired",
}


async def _packs_for(
    pack_repository: PackRepository, subscriptions: Iterable[Subscription]
) -> Dict[uuid.UUID, SubscriptionPack]:
    """Load the packs referenced by ``subscriptions``, deleted ones included."""
    pack_ids = {subscription.pack_id for subscription in subscriptions}
    if not pack_ids:
        return {}
    return await pack_repository.find_by_ids(pack_ids)


class GetCurrentSubscriptionHandler:
    """Handler for GetCurrentSubscriptionQuery."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        pack_repository: PackRepository,
        customer_repository: CustomerRepository,
        clock: Clock = system_clock,
    ):
        """Initialize handler with repositories and clock."""
        self.subscription_repository = subscription_repository
        self.pack_repository = pack_repository
        self.customer_repository = customer_repository
        self.clock = clock

    async def handle(self, query: GetCurrentSubscriptionQuery) -> CurrentSubscriptionDTO:
        """
        Handle get current subscription query.

        Args:
            query: GetCurrentSubscriptionQuery

        Returns:
            CurrentSubscriptionDTO with ``is_valid`` computed against the clock

        Raises:
            CustomerNotFoundError: If the customer does not exist
            NoActiveSubscriptionError: If the customer has no ACTIVE subscription
        """
        if not await self.customer_repository.exists(query.customer_id):
            raise CustomerNotFoundError(f"Customer {query.customer_id} not found")

        subscription = await self.subscription_repository.find_active_by_customer(
            query.customer_id
        )
        if not subscription:
            raise NoActiveSubscriptionError()

        packs = await _packs_for(self.pack_repository, [subscription])
        pack = packs[subscription.pack_id]

        return CurrentSubscriptionDTO(
            id=subscription.id,
            pack=PackSummaryDTO(
                id=pack.id,
                name=pack.name,
                sku=pack.sku.value,
                price=pack.price.amount,
                validity_months=pack.validity_months,
            ),
            status=subscription.status.value,
            assigned_at=subscription.assigned_at,
            expires_at=subscription.expires_at,
            is_valid=AccessPolicy.is_valid(subscription, self.clock.now()),
        )


class GetSubscriptionHistoryHandler:
    """Handler for GetSubscriptionHistoryQuery."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        pack_repository: PackRepository,
        customer_repository: CustomerRepository,
    ):
        """Initialize handler with repositories."""
        self.subscription_repository = subscription_repository
        self.pack_repository = pack_repository
        self.customer_repository = customer_repository

    async def handle(self, query: GetSubscriptionHistoryQuery) -> SubscriptionHistoryDTO:
        """
        Handle get subscription history query.

        Args:
            query: GetSubscriptionHistoryQuery

        Returns:
            SubscriptionHistoryDTO for the requested page

        Raises:
            CustomerNotFoundError: If the customer does not exist
            InvalidPaginationError: If page or limit is out of range
        """
        page_request = PageRequest(page=query.page, limit=query.limit)
        if not await self.customer_repository.exists(query.customer_id):
            raise CustomerNotFoundError(f"Customer {query.customer_id} not found")

        subscriptions, total = await self.subscription_repository.list_by_customer(
            query.customer_id, page_request, sort_order=query.sort_order
        )
        packs = await _packs_for(self.pack_repository, subscriptions)

        items = []
        for subscription in subscriptions:
            pack = packs.get(subscription.pack_id)
            items.append(
                SubscriptionHistoryItemDTO(
                    id=subscription.id,
                    pack_id=subscription.pack_id,
                    pack_name=pack.name if pack else "",
                    pack_sku=pack.sku.value if pack else "",
                    status=subscription.status.value,
                    requested_at=subscription.requested_at,
                    approved_at=subscription.approved_at,
                    assigned_at=subscription.assigned_at,
                    expires_at=subscription.expires_at,
                    deactivated_at=subscription.deactivated_at,
                )
            )

        return SubscriptionHistoryDTO(
            subscriptions=items,
            pagination=PaginationDTO(page=page_request.page, limit=page_request.limit, total=total),
        )


class ListSubscriptionsHandler:
    """Handler for ListSubscriptionsQuery."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        pack_repository: PackRepository,
    ):
        """Initialize handler with repositories."""
        self.subscription_repository = subscription_repository
        self.pack_repository = pack_repository

    async def handle(self, query: ListSubscriptionsQuery) -> SubscriptionListDTO:
        """
        Handle list subscriptions query.

        Args:
            query: ListSubscriptionsQuery

        Returns:
            SubscriptionListDTO, newest subscriptions first, with pack display fields
        """
        page_request = PageRequest(page=query.page, limit=query.limit)
        subscriptions, total = await self.subscription_repository.list_all(
            page_request, status=query.status
        )
        packs = await _packs_for(self.pack_repository, subscriptions)

        records = []
        for subscription in subscriptions:
            pack = packs[subscription.pack_id]
            records.append(
                SubscriptionRecordDTO(
                    id=subscription.id,
                    customer_id=subscription.customer_id,
                    pack_id=subscription.pack_id,
                    pack_name=pack.name,
                    pack_sku=pack.sku.value,
                    price=pack.price.amount,
                    validity_months=pack.validity_months,
                    status=subscription.status.value,
                    requested_at=subscription.requested_at,
                    approved_at=subscription.approved_at,
                    assigned_at=subscription.assigned_at,
                    expires_at=subscription.expires_at,
                    deactivated_at=subscription.deactivated_at,
                    created_at=subscription.created_at,
                    updated_at=subscription.updated_at,
                )
            )

        return SubscriptionListDTO(
            subscriptions=records,
            pagination=PaginationDTO(page=page_request.page, limit=page_request.limit, total=total),
        )


class GetSubscriptionOverviewHandler:
    """Handler for GetSubscriptionOverviewQuery."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        pack_repository: PackRepository,
        customer_repository: CustomerRepository,
    ):
        """Initialize handler with repositories."""
        self.subscription_repository = subscription_repository
        self.pack_repository = pack_repository
        self.customer_repository = customer_repository

    async def handle(self, query: GetSubscriptionOverviewQuery) -> SubscriptionOverviewDTO:
        """
        Handle get subscription overview query.

        Args:
            query: GetSubscriptionOverviewQuery

        Returns:
            SubscriptionOverviewDTO
        """
        counts = await self.subscription_repository.count_by_status()
        recent = await self.subscription_repository.find_recently_updated(query.recent_limit)
        packs = await _packs_for(self.pack_repository, recent)

        activities = [
            RecentActivityDTO(
                subscription_id=subscription.id,
                customer_id=subscription.customer_id,
                pack_name=packs[subscription.pack_id].name,
                type=_ACTIVITY_BY_STATUS[subscription.status],
                timestamp=subscription.updated_at,
            )
            for subscription in recent
        ]

        return SubscriptionOverviewDTO(
            total_customers=await self.customer_repository.count(),
            active_subscriptions=counts[SubscriptionStatus.ACTIVE],
            pending_requests=counts[SubscriptionStatus.REQUESTED],
            approved_awaiting_assignment=counts[SubscriptionStatus.APPROVED],
            total_revenue=await self.subscription_repository.total_active_revenue(),
            recent_activities=activities,
        )
