"""
Subscription lifecycle handlers.

Handlers for request, approve, assign, unassign and deactivate commands.
Each handler resolves its inputs, then runs the matching ledger operation
through ``SubscriptionRepository.apply_for_customer`` and publishes the
resulting events once the change is committed.
"""
import logging

from core.domain.clock import Clock, system_clock
from core.domain.exceptions import (
    InvalidSubscriptionStatusError,
    PackNotFoundError,
    SubscriptionNotFoundError,
)
from core.domain.value_objects import ApprovalPolicy, SubscriptionStatus
from core.infrastructure.events import event_bus
from packs.ports.pack_repository import PackRepository
from subscriptions.application.commands.approve_subscription import ApproveSubscriptionCommand
from subscriptions.application.commands.assign_subscription import AssignSubscriptionCommand
from subscriptions.application.commands.deactivate_subscription import (
    DeactivateSubscriptionCommand,
)
from subscriptions.application.commands.request_subscription import RequestSubscriptionCommand
from subscriptions.application.commands.unassign_subscription import (
    UnassignSubscriptionCommand,
)
from subscriptions.application.dto.subscription_dto import (
    DeactivationDTO,
    RequestedSubscriptionDTO,
    SubscriptionStatusDTO,
)
from subscriptions.domain.events import events_for
from subscriptions.domain.services import LedgerChange, SubscriptionLedger
from subscriptions.ports.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)


def _status_dto(change: LedgerChange) -> SubscriptionStatusDTO:
    subscription = change.subscription
    return SubscriptionStatusDTO(
        id=subscription.id,
        customer_id=subscription.customer_id,
        pack_id=subscription.pack_id,
        status=subscription.status.value,
        assigned_at=subscription.assigned_at,
        expires_at=subscription.expires_at,
        deactivated_at=subscription.deactivated_at,
        deactivated_ids=[record.id for record in change.deactivated],
    )


class RequestSubscriptionHandler:
    """Handler for RequestSubscriptionCommand."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        pack_repository: PackRepository,
        clock: Clock = system_clock,
    ):
        """Initialize handler with repositories and clock."""
        self.subscription_repository = subscription_repository
        self.pack_repository = pack_repository
        self.clock = clock

    async def handle(self, command: RequestSubscriptionCommand) -> RequestedSubscriptionDTO:
        """
        Handle request subscription command.

        Args:
            command: RequestSubscriptionCommand

        Returns:
            RequestedSubscriptionDTO

        Raises:
            PackNotFoundError: If the SKU does not resolve to a non-deleted pack
            CustomerNotFoundError: If the customer does not exist
            ActiveSubscriptionExistsError: If the customer already has an ACTIVE subscription
        """
        pack = await self.pack_repository.find_by_sku(command.sku)
        if not pack:
            raise PackNotFoundError(f"Subscription pack with SKU '{command.sku}' not found")

        now = self.clock.now()
        change = await self.subscription_repository.apply_for_customer(
            command.customer_id,
            lambda records: SubscriptionLedger.request(records, command.customer_id, pack, now),
        )

        await event_bus.publish_all(events_for(change))

        requested = change.subscription
        return RequestedSubscriptionDTO(
            id=requested.id,
            status=requested.status.value,
            requested_at=requested.requested_at,
        )


class ApproveSubscriptionHandler:
    """Handler for ApproveSubscriptionCommand."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        pack_repository: PackRepository,
        clock: Clock = system_clock,
        approval_policy: ApprovalPolicy = ApprovalPolicy.AUTO_ACTIVATE,
    ):
        """Initialize handler with repositories, clock and approval policy."""
        self.subscription_repository = subscription_repository
        self.pack_repository = pack_repository
        self.clock = clock
        self.approval_policy = approval_policy

    async def handle(self, command: ApproveSubscriptionCommand) -> SubscriptionStatusDTO:
        """
        Handle approve subscription command.

        Args:
            command: ApproveSubscriptionCommand

        Returns:
            SubscriptionStatusDTO (ACTIVE, or APPROVED under APPROVE_ONLY)

        Raises:
            SubscriptionNotFoundError: If subscription not found
            InvalidSubscriptionStatusError: If subscription is not REQUESTED
            PackNotFoundError: If the requested pack has been removed
        """
        subscription = await self.subscription_repository.find_by_id(command.subscription_id)
        if not subscription:
            raise SubscriptionNotFoundError(f"Subscription {command.subscription_id} not found")
        if subscription.status != SubscriptionStatus.REQUESTED:
            raise InvalidSubscriptionStatusError()

        pack = await self.pack_repository.find_by_id(subscription.pack_id)
        if not pack:
            raise PackNotFoundError(f"Subscription pack {subscription.pack_id} not found")

        now = self.clock.now()
        change = await self.subscription_repository.apply_for_customer(
            subscription.customer_id,
            lambda records: SubscriptionLedger.approve(
                records, subscription, pack, now, self.approval_policy
            ),
        )
        logger.info(
            "Approved subscription %s (%s)",
            subscription.id,
            self.approval_policy,
            extra={"subscription_id": str(subscription.id)},
        )

        await event_bus.publish_all(events_for(change))

        return _status_dto(change)


class AssignSubscriptionHandler:
    """Handler for AssignSubscriptionCommand."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        pack_repository: PackRepository,
        clock: Clock = system_clock,
    ):
        """Initialize handler with repositories and clock."""
        self.subscription_repository = subscription_repository
        self.pack_repository = pack_repository
        self.clock = clock

    async def handle(self, command: AssignSubscriptionCommand) -> SubscriptionStatusDTO:
        """
        Handle assign subscription command.

        Args:
            command: AssignSubscriptionCommand

        Returns:
            SubscriptionStatusDTO of the new ACTIVE subscription

        Raises:
            PackNotFoundError: If the pack is unknown or deleted
            CustomerNotFoundError: If the customer does not exist
        """
        pack = await self.pack_repository.find_by_id(command.pack_id)
        if not pack:
            raise PackNotFoundError(f"Subscription pack {command.pack_id} not found")

        now = self.clock.now()
        change = await self.subscription_repository.apply_for_customer(
            command.customer_id,
            lambda records: SubscriptionLedger.assign(records, command.customer_id, pack, now),
        )

        await event_bus.publish_all(events_for(change))

        return _status_dto(change)


class UnassignSubscriptionHandler:
    """Handler for UnassignSubscriptionCommand."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        clock: Clock = system_clock,
    ):
        """Initialize handler with repository and clock."""
        self.subscription_repository = subscription_repository
        self.clock = clock

    async def handle(self, command: UnassignSubscriptionCommand) -> SubscriptionStatusDTO:
        """
        Handle unassign subscription command.

        Unassigning a subscription that is no longer ACTIVE succeeds
        without changing it.

        Args:
            command: UnassignSubscriptionCommand

        Returns:
            SubscriptionStatusDTO of the subscription

        Raises:
            SubscriptionNotFoundError: If the subscription does not belong to the customer
        """
        subscription = await self.subscription_repository.find_by_id(command.subscription_id)
        if not subscription or subscription.customer_id != command.customer_id:
            raise SubscriptionNotFoundError(f"Subscription {command.subscription_id} not found")

        now = self.clock.now()
        change = await self.subscription_repository.apply_for_customer(
            command.customer_id,
            lambda records: SubscriptionLedger.unassign(records, subscription, now),
        )

        await event_bus.publish_all(events_for(change))

        return _status_dto(change)


class DeactivateSubscriptionHandler:
    """Handler for DeactivateSubscriptionCommand."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        clock: Clock = system_clock,
    ):
        """Initialize handler with repository and clock."""
        self.subscription_repository = subscription_repository
        self.clock = clock

    async def handle(self, command: DeactivateSubscriptionCommand) -> DeactivationDTO:
        """
        Handle deactivate subscription command.

        Args:
            command: DeactivateSubscriptionCommand

        Returns:
            DeactivationDTO with the deactivation time

        Raises:
            NoActiveSubscriptionError: If the customer has no ACTIVE subscription
            CustomerNotFoundError: If the customer does not exist
        """
        now = self.clock.now()
        change = await self.subscription_repository.apply_for_customer(
            command.customer_id,
            lambda records: SubscriptionLedger.deactivate(records, now),
        )

        await event_bus.publish_all(events_for(change))

        deactivated = change.subscription
        return DeactivationDTO(id=deactivated.id, deactivated_at=deactivated.deactivated_at)
