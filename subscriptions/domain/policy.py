"""
Access policy.

Pure rules with no storage of their own: whether a subscription grants
access right now, and the at-most-one-ACTIVE-per-customer rule.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from core.domain.exceptions import ActiveSubscriptionExistsError, ConflictError
from subscriptions.domain.subscription import Subscription


class AccessPolicy:
    """Domain service for subscription validity and exclusivity."""

    @staticmethod
    def is_valid(subscription: Subscription, now: datetime) -> bool:
        """
        Check whether a subscription currently grants access.

        Args:
            subscription: Subscription to check
            now: Current time

        Returns:
            True if the subscription is ACTIVE and not yet past expires_at
        """
        return (
            subscription.is_active
            and subscription.expires_at is not None
            and subscription.expires_at > now
        )

    @staticmethod
    def current_active(subscriptions: Iterable[Subscription]) -> Optional[Subscription]:
        """Return the customer's ACTIVE subscription, if any."""
        active = [s for s in subscriptions if s.is_active]
        if not active:
            return None
        return max(active, key=lambda s: s.assigned_at)

    @staticmethod
    def ensure_can_request(subscriptions: Iterable[Subscription]) -> None:
        """
        Refuse a new request while the customer holds an ACTIVE subscription.

        Raises:
            ActiveSubscriptionExistsError: If an ACTIVE subscription exists
        """
        if AccessPolicy.current_active(subscriptions) is not None:
            raise ActiveSubscriptionExistsError()

    @staticmethod
    def supersede_active(
        subscriptions: Iterable[Subscription], now: datetime
    ) -> List[Subscription]:
        """
        Deactivate every ACTIVE subscription ahead of a new activation.

        Args:
            subscriptions: The customer's open subscriptions
            now: Deactivation time

        Returns:
            The deactivated copies, to be persisted before the new ACTIVE record
        """
        return [s.deactivate(now) for s in subscriptions if s.is_active]

    @staticmethod
    def ensure_single_active(subscriptions: Iterable[Subscription]) -> None:
        """
        Final check on a customer's records before they are committed.

        Raises:
            ConflictError: If more than one record is ACTIVE
        """
        active = [s for s in subscriptions if s.is_active]
        if len(active) > 1:
            raise ConflictError(
                f"Customer {active[0].customer_id} would hold {len(active)} active subscriptions"
            )
