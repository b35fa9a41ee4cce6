"""
Expiry sweeper handler.

Moves ACTIVE subscriptions whose expiry moment has passed to EXPIRED.
"""
import logging
import time
import uuid
from typing import Set

from core.domain.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from core.metrics import expiry_sweep_duration_seconds, expiry_sweep_failures_total
from subscriptions.application.commands.expire_subscriptions import ExpireSubscriptionsCommand
from subscriptions.application.dto.subscription_dto import ExpirySweepResultDTO
from subscriptions.domain.events import events_for
from subscriptions.domain.services import SubscriptionLedger
from subscriptions.ports.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)


class ExpireSubscriptionsHandler:
    """
    Handler for ExpireSubscriptionsCommand.

    Overdue records are collected in batches, then each one is expired
    under its customer's lock. A record that left ACTIVE in the meantime
    is skipped, and a record that fails is logged and left for the next
    run.
    """

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        clock: Clock = system_clock,
    ):
        """Initialize handler with repository and clock."""
        self.subscription_repository = subscription_repository
        self.clock = clock

    async def handle(self, command: ExpireSubscriptionsCommand) -> ExpirySweepResultDTO:
        """
        Handle expire subscriptions command.

        Args:
            command: ExpireSubscriptionsCommand

        Returns:
            ExpirySweepResultDTO summarising the run
        """
        started = time.perf_counter()
        now = self.clock.now()
        result = ExpirySweepResultDTO(
            as_of=now, checked=0, expired=0, skipped=0, dry_run=command.dry_run
        )
        seen: Set[uuid.UUID] = set()
        # Records still overdue after their turn (failed, or dry run) come
        # back from every query, so each fetch reaches past them.
        left_overdue = 0

        while True:
            limit = command.batch_size + left_overdue
            batch = await self.subscription_repository.find_overdue(now, limit)
            fresh = [subscription for subscription in batch if subscription.id not in seen]
            if not fresh:
                break

            for subscription in fresh:
                seen.add(subscription.id)
                result.checked += 1
                if command.dry_run:
                    logger.info(
                        "Would expire subscription %s (expired at %s)",
                        subscription.id,
                        subscription.expires_at,
                    )
                    left_overdue += 1
                    continue
                if not await self._expire_one(subscription, now, result):
                    left_overdue += 1

            if len(batch) < limit:
                break

        expiry_sweep_duration_seconds.observe(time.perf_counter() - started)
        logger.info(
            "Expiry sweep finished: %d checked, %d expired, %d skipped, %d failed",
            result.checked,
            result.expired,
            result.skipped,
            len(result.failed),
            extra={"as_of": now.isoformat(), "dry_run": command.dry_run},
        )
        return result

    async def _expire_one(self, subscription, now, result: ExpirySweepResultDTO) -> bool:
        """Expire one record. Returns False if the record failed and is still overdue."""
        try:
            change = await self.subscription_repository.apply_for_customer(
                subscription.customer_id,
                lambda records: SubscriptionLedger.expire(records, subscription.id, now),
                include_deleted_customer=True,
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            expiry_sweep_failures_total.inc()
            result.failed.append(subscription.id)
            logger.error(
                "Error expiring subscription %s: %s",
                subscription.id,
                e,
                exc_info=True,
                extra={"subscription_id": str(subscription.id)},
            )
            return False

        if not change.changed:
            result.skipped += 1
            return True

        result.expired += 1
        await event_bus.publish_all(events_for(change))
        return True
