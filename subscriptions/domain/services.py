"""
Subscription ledger domain services.

Each ledger operation receives the customer's open subscriptions
(REQUESTED, APPROVED or ACTIVE), as read under the customer's lock, and
returns a LedgerChange describing the records to persist. Nothing here
touches storage or the clock.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from core.domain.exceptions import (
    InvalidSubscriptionStatusError,
    NoActiveSubscriptionError,
)
from core.domain.value_objects import ApprovalPolicy, SubscriptionStatus
from packs.domain.pack import SubscriptionPack
from subscriptions.domain.policy import AccessPolicy
from subscriptions.domain.subscription import Subscription


@dataclass(frozen=True)
class LedgerChange:
    """
    Outcome of one ledger operation.

    ``subscription`` is the record the operation was about. ``deactivated``
    holds ACTIVE records retired to make room for it. When ``changed`` is
    False the operation was a no-op and nothing is written.
    """

    subscription: Optional[Subscription]
    deactivated: Tuple[Subscription, ...] = ()
    changed: bool = True

    @property
    def records(self) -> List[Subscription]:
        """Records to persist, deactivations first."""
        if not self.changed:
            return []
        records = list(self.deactivated)
        if self.subscription is not None:
            records.append(self.subscription)
        return records


def _find(records: Sequence[Subscription], subscription_id: uuid.UUID) -> Optional[Subscription]:
    return next((record for record in records if record.id == subscription_id), None)


def _checked(open_records: Sequence[Subscription], change: LedgerChange) -> LedgerChange:
    merged = {record.id: record for record in open_records}
    merged.update({record.id: record for record in change.records})
    AccessPolicy.ensure_single_active(merged.values())
    return change


class SubscriptionLedger:
    """Domain service implementing the subscription state machine."""

    @staticmethod
    def request(
        open_records: Sequence[Subscription],
        customer_id: uuid.UUID,
        pack: SubscriptionPack,
        now: datetime,
    ) -> LedgerChange:
        """
        Record a customer's request for a pack.

        Raises:
            ActiveSubscriptionExistsError: If the customer holds an ACTIVE subscription
        """
        AccessPolicy.ensure_can_request(open_records)
        requested = Subscription.request(customer_id=customer_id, pack_id=pack.id, now=now)
        return _checked(open_records, LedgerChange(subscription=requested))

    @staticmethod
    def approve(
        open_records: Sequence[Subscription],
        subscription: Subscription,
        pack: SubscriptionPack,
        now: datetime,
        policy: ApprovalPolicy = ApprovalPolicy.AUTO_ACTIVATE,
    ) -> LedgerChange:
        """
        Approve a REQUESTED subscription.

        With AUTO_ACTIVATE the record goes straight to ACTIVE after any
        current ACTIVE record of the customer is deactivated. With
        APPROVE_ONLY it stops at APPROVED.

        Args:
            open_records: Customer's open subscriptions
            subscription: Subscription being approved, as last read
            pack: The subscription's pack
            now: Approval time
            policy: Approval policy

        Raises:
            InvalidSubscriptionStatusError: If the record is not REQUESTED
        """
        current = _find(open_records, subscription.id)
        if current is None or current.status != SubscriptionStatus.REQUESTED:
            raise InvalidSubscriptionStatusError()

        approved = current.approve(now)
        if policy == ApprovalPolicy.APPROVE_ONLY:
            return _checked(open_records, LedgerChange(subscription=approved))

        others = [record for record in open_records if record.id != current.id]
        deactivated = AccessPolicy.supersede_active(others, now)
        activated = approved.activate(pack, now)
        return _checked(
            open_records,
            LedgerChange(subscription=activated, deactivated=tuple(deactivated)),
        )

    @staticmethod
    def assign(
        open_records: Sequence[Subscription],
        customer_id: uuid.UUID,
        pack: SubscriptionPack,
        now: datetime,
    ) -> LedgerChange:
        """
        Put a customer on a pack immediately.

        Any ACTIVE record is deactivated first. The newest pending record for
        the same pack is activated when there is one, otherwise a new ACTIVE
        record is created.
        """
        deactivated = AccessPolicy.supersede_active(open_records, now)

        pending = [
            record
            for record in open_records
            if record.is_pending and record.pack_id == pack.id
        ]
        if pending:
            newest = max(pending, key=lambda record: record.requested_at)
            activated = newest.activate(pack, now)
        else:
            activated = Subscription.assign(customer_id=customer_id, pack=pack, now=now)

        return _checked(
            open_records,
            LedgerChange(subscription=activated, deactivated=tuple(deactivated)),
        )

    @staticmethod
    def unassign(
        open_records: Sequence[Subscription],
        subscription: Subscription,
        now: datetime,
    ) -> LedgerChange:
        """
        Deactivate a specific subscription of the customer.

        A record that is no longer ACTIVE is left as is.
        """
        current = _find(open_records, subscription.id)
        if current is None or not current.is_active:
            return LedgerChange(subscription=current or subscription, changed=False)
        return _checked(open_records, LedgerChange(subscription=current.deactivate(now)))

    @staticmethod
    def deactivate(open_records: Sequence[Subscription], now: datetime) -> LedgerChange:
        """
        Deactivate the customer's ACTIVE subscription.

        Raises:
            NoActiveSubscriptionError: If the customer has no ACTIVE subscription
        """
        active = AccessPolicy.current_active(open_records)
        if active is None:
            raise NoActiveSubscriptionError()

        others = [record for record in open_records if record.id != active.id]
        return _checked(
            open_records,
            LedgerChange(
                subscription=active.deactivate(now),
                deactivated=tuple(AccessPolicy.supersede_active(others, now)),
            ),
        )

    @staticmethod
    def expire(
        open_records: Sequence[Subscription],
        subscription_id: uuid.UUID,
        now: datetime,
    ) -> LedgerChange:
        """
        Expire one overdue ACTIVE subscription.

        Records that were deactivated, expired or renewed since they were
        picked up are skipped.
        """
        current = _find(open_records, subscription_id)
        if current is None or not current.is_overdue(now):
            return LedgerChange(subscription=current, changed=False)
        return LedgerChange(subscription=current.expire(now))
