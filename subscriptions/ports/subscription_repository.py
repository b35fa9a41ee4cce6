"""
Subscription repository port (interface).

This defines the contract for subscription persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import uuid

from core.domain.value_objects import PageRequest, SortOrder, SubscriptionStatus
from subscriptions.domain.services import LedgerChange
from subscriptions.domain.subscription import Subscription

LedgerOperation = Callable[[Sequence[Subscription]], LedgerChange]


class SubscriptionRepository(ABC):
    """
    Abstract repository for Subscription entities.

    All status changes go through ``apply_for_customer`` so that the
    read-check-write sequence of a transition is serialized per customer.
    """

    @abstractmethod
    async def apply_for_customer(
        self,
        customer_id: uuid.UUID,
        operation: LedgerOperation,
        include_deleted_customer: bool = False,
    ) -> LedgerChange:
        """
        Run a ledger operation atomically for one customer.

        The customer's open subscriptions (REQUESTED, APPROVED, ACTIVE) are
        loaded while holding the customer's lock, passed to ``operation``,
        and the records of the returned change are persisted before the lock
        is released. An exception raised by ``operation`` leaves storage
        untouched.

        The expiry sweep sets ``include_deleted_customer`` so that overdue
        records of a soft-deleted customer are expired as well.

        Args:
            customer_id: Customer UUID
            operation: Pure function from open subscriptions to a LedgerChange
            include_deleted_customer: Also lock a soft-deleted customer

        Returns:
            The committed LedgerChange

        Raises:
            CustomerNotFoundError: If the customer does not exist, or is
                soft-deleted and ``include_deleted_customer`` is not set
        """
        pass

    @abstractmethod
    async def save(self, subscription: Subscription) -> Subscription:
        """
        Save a subscription entity without taking the customer lock.

        This is a direct write for importing existing records and seeding
        data. It runs no ledger checks, so lifecycle changes must go
        through ``apply_for_customer``.

        Args:
            subscription: Subscription entity to save

        Returns:
            Saved subscription entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, subscription_id: uuid.UUID) -> Optional[Subscription]:
        """
        Find a subscription by ID.

        Args:
            subscription_id: Subscription UUID

        Returns:
            Subscription entity or None if not found
        """
        pass

    @abstractmethod
    async def find_active_by_customer(self, customer_id: uuid.UUID) -> Optional[Subscription]:
        """
        Find the customer's ACTIVE subscription.

        Args:
            customer_id: Customer UUID

        Returns:
            Subscription entity or None if the customer has none
        """
        pass

    @abstractmethod
    async def list_by_customer(
        self,
        customer_id: uuid.UUID,
        page_request: PageRequest,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Tuple[List[Subscription], int]:
        """
        Page through a customer's subscriptions.

        Ordered by assigned_at, falling back to created_at for records
        never assigned.

        Returns:
            Tuple of (subscriptions on the page, total for the customer)
        """
        pass

    @abstractmethod
    async def list_all(
        self,
        page_request: PageRequest,
        status: Optional[SubscriptionStatus] = None,
    ) -> Tuple[List[Subscription], int]:
        """
        Page through all subscriptions, newest first.

        Args:
            page_request: Page and limit
            status: Optional status filter

        Returns:
            Tuple of (subscriptions on the page, total matching)
        """
        pass

    @abstractmethod
    async def find_overdue(self, now: datetime, limit: int) -> List[Subscription]:
        """
        Find ACTIVE subscriptions whose expires_at is before ``now``.

        Args:
            now: Reference time
            limit: Maximum number of records to return

        Returns:
            List of Subscription entities, oldest expiry first
        """
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[SubscriptionStatus, int]:
        """
        Count subscriptions per status.

        Returns:
            Mapping with an entry for every status
        """
        pass

    @abstractmethod
    async def total_active_revenue(self) -> Decimal:
        """
        Sum the pack prices of all ACTIVE subscriptions.

        Returns:
            Total as a Decimal
        """
        pass

    @abstractmethod
    async def find_recently_updated(self, limit: int) -> List[Subscription]:
        """
        Most recently updated subscriptions.

        Args:
            limit: Maximum number of records

        Returns:
            List of Subscription entities, newest update first
        """
        pass
