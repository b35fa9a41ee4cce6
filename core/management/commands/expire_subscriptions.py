"""
Django management command to expire overdue subscriptions.

The same sweep runs on the Celery beat schedule; this command is for
manual runs and catch-up after downtime.
"""

import logging
from datetime import timezone as dt_timezone

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from core.domain.clock import FixedClock, system_clock
from subscriptions.application.commands.expire_subscriptions import ExpireSubscriptionsCommand
from subscriptions.application.handlers.expire_subscriptions_handler import (
    ExpireSubscriptionsHandler,
)
from subscriptions.infrastructure.repositories.django_subscription_repository import (
    DjangoSubscriptionRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to expire overdue subscriptions."""

    help = "Move ACTIVE subscriptions past their expiry date to EXPIRED"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually update subscriptions",
        )
        parser.add_argument(
            "--as-of",
            dest="as_of",
            help="ISO 8601 timestamp to sweep as of (defaults to now)",
        )
        parser.add_argument(
            "--batch-size",
            dest="batch_size",
            type=int,
            default=None,
            help="Records fetched per batch",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        clock = system_clock
        if options["as_of"]:
            as_of = parse_datetime(options["as_of"])
            if as_of is None:
                raise CommandError(f"Invalid --as-of timestamp: {options['as_of']}")
            if timezone.is_naive(as_of):
                as_of = timezone.make_aware(as_of, dt_timezone.utc)
            clock = FixedClock(as_of)

        batch_size = options["batch_size"] or settings.SUBSCRIPTION_EXPIRY_SWEEP_BATCH_SIZE
        if batch_size < 1:
            raise CommandError("--batch-size must be at least 1")

        handler = ExpireSubscriptionsHandler(
            subscription_repository=DjangoSubscriptionRepository(),
            clock=clock,
        )
        result = async_to_sync(handler.handle)(
            ExpireSubscriptionsCommand(batch_size=batch_size, dry_run=options["dry_run"])
        )

        self.stdout.write(f"Found {result.checked} overdue subscription(s)")

        if result.dry_run:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            return

        if result.failed:
            # pylint: disable=no-member
            self.stdout.write(
                self.style.ERROR(f"Failed to expire {len(result.failed)} subscription(s)")
            )

        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(
                f"Successfully expired {result.expired} subscription(s), "
                f"skipped {result.skipped}"
            )
        )
