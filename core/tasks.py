"""
Celery tasks for background processing.

Tasks for the periodic subscription expiry sweep.
"""
import logging
from typing import Optional

from asgiref.sync import async_to_sync
from django.conf import settings

from SubscriptionService.celery import app
from subscriptions.application.commands.expire_subscriptions import ExpireSubscriptionsCommand
from subscriptions.application.handlers.expire_subscriptions_handler import (
    ExpireSubscriptionsHandler,
)
from subscriptions.infrastructure.repositories.django_subscription_repository import (
    DjangoSubscriptionRepository,
)

logger = logging.getLogger(__name__)


@app.task
def expire_overdue_subscriptions(batch_size: Optional[int] = None) -> dict:
    """
    Celery task for the expiry sweep.

    Args:
        batch_size: Records fetched per batch (defaults to the configured size)

    Returns:
        Summary of the sweep
    """
    handler = ExpireSubscriptionsHandler(subscription_repository=DjangoSubscriptionRepository())
    command = ExpireSubscriptionsCommand(
        batch_size=batch_size or settings.SUBSCRIPTION_EXPIRY_SWEEP_BATCH_SIZE
    )
    result = async_to_sync(handler.handle)(command)
    return {
        "as_of": result.as_of.isoformat(),
        "checked": result.checked,
        "expired": result.expired,
        "skipped": result.skipped,
        "failed": [str(subscription_id) for subscription_id in result.failed],
    }
