"""
Subscription domain entity.

A subscription is a customer's instance of a pack with its own lifecycle:

    REQUESTED -> APPROVED -> ACTIVE -> INACTIVE
    REQUESTED -> ACTIVE (admin assignment)
    ACTIVE -> EXPIRED (expiry sweep only)

INACTIVE and EXPIRED are terminal for the record.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.exceptions import InvalidStateError, InvalidSubscriptionStatusError
from core.domain.value_objects import SubscriptionStatus
from packs.domain.pack import SubscriptionPack


@dataclass(frozen=True)
class Subscription:
    """
    Subscription domain entity.

    Every transition returns a new instance; the entity itself never
    reads the clock, the caller passes ``now``.
    """

    id: uuid.UUID
    customer_id: uuid.UUID
    pack_id: uuid.UUID
    status: SubscriptionStatus
    requested_at: datetime
    created_at: datetime
    updated_at: datetime
    approved_at: Optional[datetime] = None
    assigned_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    deactivated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate subscription entity."""
        if not self.customer_id:
            raise ValueError("Customer ID is required")
        if not self.pack_id:
            raise ValueError("Pack ID is required")
        if self.status == SubscriptionStatus.ACTIVE and (
            self.assigned_at is None or self.expires_at is None
        ):
            raise ValueError("Active subscription requires assigned_at and expires_at")

    @classmethod
    def request(
        cls,
        customer_id: uuid.UUID,
        pack_id: uuid.UUID,
        now: datetime,
        subscription_id: Optional[uuid.UUID] = None,
    ) -> "Subscription":
        """
        Create a customer-initiated subscription in REQUESTED status.

        Args:
            customer_id: Owning customer UUID
            pack_id: Requested pack UUID
            now: Request time
            subscription_id: Optional UUID (generated if not provided)

        Returns:
            Subscription entity instance
        """
        return cls(
            id=subscription_id or uuid.uuid4(),
            customer_id=customer_id,
            pack_id=pack_id,
            status=SubscriptionStatus.REQUESTED,
            requested_at=now,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def assign(
        cls,
        customer_id: uuid.UUID,
        pack: SubscriptionPack,
        now: datetime,
        subscription_id: Optional[uuid.UUID] = None,
    ) -> "Subscription":
        """
        Create an admin-assigned subscription directly in ACTIVE status.

        Args:
            customer_id: Owning customer UUID
            pack: Pack being assigned
            now: Assignment time
            subscription_id: Optional UUID (generated if not provided)

        Returns:
            Subscription entity instance
        """
        return cls(
            id=subscription_id or uuid.uuid4(),
            customer_id=customer_id,
            pack_id=pack.id,
            status=SubscriptionStatus.ACTIVE,
            requested_at=now,
            approved_at=now,
            assigned_at=now,
            expires_at=pack.expires_from(now),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE

    @property
    def is_pending(self) -> bool:
        return self.status.is_pending

    def is_overdue(self, now: datetime) -> bool:
        """True for an ACTIVE record whose expiry moment has passed."""
        return self.is_active and self.expires_at < now

    def approve(self, now: datetime) -> "Subscription":
        """
        Create a new Subscription instance in APPROVED status.

        Raises:
            InvalidSubscriptionStatusError: If the record is not REQUESTED
        """
        if self.status != SubscriptionStatus.REQUESTED:
            raise InvalidSubscriptionStatusError()
        return replace(
            self,
            status=SubscriptionStatus.APPROVED,
            approved_at=now,
            updated_at=now,
        )

    def activate(self, pack: SubscriptionPack, now: datetime) -> "Subscription":
        """
        Create a new Subscription instance in ACTIVE status.

        The validity window is fixed here from the pack's current
        validity_months and is not re-derived afterwards.

        Args:
            pack: The pack this subscription references
            now: Activation time

        Raises:
            InvalidStateError: If the record is not REQUESTED or APPROVED
        """
        if not self.is_pending:
            raise InvalidStateError(
                f"Cannot activate a subscription in {self.status} status"
            )
        if pack.id != self.pack_id:
            raise ValueError("Pack does not match subscription")
        return replace(
            self,
            status=SubscriptionStatus.ACTIVE,
            approved_at=self.approved_at or now,
            assigned_at=now,
            expires_at=pack.expires_from(now),
            updated_at=now,
        )

    def deactivate(self, now: datetime) -> "Subscription":
        """
        Create a new Subscription instance in INACTIVE status.

        Raises:
            InvalidStateError: If the record is not ACTIVE
        """
        if not self.is_active:
            raise InvalidStateError(
                f"Cannot deactivate a subscription in {self.status} status"
            )
        return replace(
            self,
            status=SubscriptionStatus.INACTIVE,
            deactivated_at=now,
            updated_at=now,
        )

    def expire(self, now: datetime) -> "Subscription":
        """
        Create a new Subscription instance in EXPIRED status.

        Raises:
            InvalidStateError: If the record is not ACTIVE and overdue
        """
        if not self.is_overdue(now):
            raise InvalidStateError("Only overdue active subscriptions can expire")
        return replace(self, status=SubscriptionStatus.EXPIRED, updated_at=now)
