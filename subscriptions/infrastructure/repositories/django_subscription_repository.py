"""
Django implementation of SubscriptionRepository port.

This adapter converts between domain entities and Django ORM models and
provides the per-customer serialization used by every transition.
"""
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction
from django.db.models import Count, F, Sum
from django.db.models.functions import Coalesce

from core.domain.exceptions import CustomerNotFoundError
from core.domain.value_objects import PageRequest, SortOrder, SubscriptionStatus
from customers.infrastructure.models import Customer as CustomerModel
from subscriptions.domain.services import LedgerChange
from subscriptions.domain.subscription import Subscription
from subscriptions.infrastructure.models import Subscription as SubscriptionModel
from subscriptions.ports.subscription_repository import (
    LedgerOperation,
    SubscriptionRepository,
)

logger = logging.getLogger(__name__)


class DjangoSubscriptionRepository(SubscriptionRepository):
    """
    Django ORM implementation of SubscriptionRepository.

    Transitions run inside ``transaction.atomic()`` with the customer row
    locked by ``select_for_update()``, so two transitions for the same
    customer never interleave while different customers proceed in
    parallel.
    """

    def _to_domain(self, model: SubscriptionModel) -> Subscription:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Subscription model

        Returns:
            Subscription domain entity
        """
        return Subscription(
            id=model.id,
            customer_id=model.customer_id,
            pack_id=model.pack_id,
            status=SubscriptionStatus(model.status),
            requested_at=model.requested_at,
            approved_at=model.approved_at,
            assigned_at=model.assigned_at,
            expires_at=model.expires_at,
            deactivated_at=model.deactivated_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(
        self, subscription: Subscription, model: Optional[SubscriptionModel] = None
    ) -> SubscriptionModel:
        """
        Convert domain entity to Django model.

        Args:
            subscription: Subscription domain entity
            model: Already loaded row for this entity, if any

        Returns:
            Django Subscription model with the entity's state applied
        """
        if model is None:
            model = SubscriptionModel.objects.filter(id=subscription.id).first()
        if model is None:
            model = SubscriptionModel(
                id=subscription.id,
                customer_id=subscription.customer_id,
                pack_id=subscription.pack_id,
            )
        model.status = subscription.status.value
        model.requested_at = subscription.requested_at
        model.approved_at = subscription.approved_at
        model.assigned_at = subscription.assigned_at
        model.expires_at = subscription.expires_at
        model.deactivated_at = subscription.deactivated_at
        model.created_at = subscription.created_at
        model.updated_at = subscription.updated_at
        return model

    @sync_to_async
    def apply_for_customer(
        self,
        customer_id: uuid.UUID,
        operation: LedgerOperation,
        include_deleted_customer: bool = False,
    ) -> LedgerChange:
        """
        Run a ledger operation atomically for one customer.

        Args:
            customer_id: Customer UUID
            operation: Pure function from open subscriptions to a LedgerChange
            include_deleted_customer: Also lock a soft-deleted customer

        Returns:
            The committed LedgerChange
        """
        with transaction.atomic():
            customers = CustomerModel.objects.select_for_update().filter(id=customer_id)
            if not include_deleted_customer:
                customers = customers.filter(deleted_at__isnull=True)
            locked = customers.values_list("id", flat=True).first()
            if locked is None:
                raise CustomerNotFoundError(f"Customer {customer_id} not found")

            rows = {
                model.id: model
                for model in SubscriptionModel.objects.filter(
                    customer_id=customer_id, status__in=SubscriptionModel.OPEN_STATUSES
                ).order_by("created_at")
            }
            change = operation([self._to_domain(model) for model in rows.values()])

            for record in change.records:
                self._to_model(record, rows.get(record.id)).save()
                logger.info(
                    "Subscription %s is now %s",
                    record.id,
                    record.status,
                    extra={
                        "subscription_id": str(record.id),
                        "customer_id": str(record.customer_id),
                        "status": record.status.value,
                    },
                )
        return change

    @sync_to_async
    def save(self, subscription: Subscription) -> Subscription:
        """
        Save a subscription entity.

        Args:
            subscription: Subscription entity to save

        Returns:
            Saved subscription entity
        """
        model = self._to_model(subscription)
        model.save()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, subscription_id: uuid.UUID) -> Optional[Subscription]:
        """
        Find a subscription by ID.

        Args:
            subscription_id: Subscription UUID

        Returns:
            Subscription entity or None if not found
        """
        try:
            model = SubscriptionModel.objects.get(id=subscription_id)
            return self._to_domain(model)
        except SubscriptionModel.DoesNotExist:
            return None

    @sync_to_async
    def find_active_by_customer(self, customer_id: uuid.UUID) -> Optional[Subscription]:
        """
        Find the customer's ACTIVE subscription.

        Args:
            customer_id: Customer UUID

        Returns:
            Subscription entity or None
        """
        model = (
            SubscriptionModel.objects.filter(customer_id=customer_id, status="active")
            .order_by("-assigned_at")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_by_customer(
        self,
        customer_id: uuid.UUID,
        page_request: PageRequest,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Tuple[List[Subscription], int]:
        """
        Page through a customer's subscriptions by assigned_at, then created_at.

        Returns:
            Tuple of (subscriptions on the page, total for the customer)
        """
        queryset = SubscriptionModel.objects.filter(customer_id=customer_id).annotate(
            history_at=Coalesce("assigned_at", "created_at")
        )
        total = queryset.count()
        if sort_order == SortOrder.ASC:
            queryset = queryset.order_by(F("history_at").asc(), "created_at", "id")
        else:
            queryset = queryset.order_by(F("history_at").desc(), "-created_at", "-id")
        page = queryset[page_request.offset : page_request.offset + page_request.limit]
        return [self._to_domain(model) for model in page], total

    @sync_to_async
    def list_all(
        self,
        page_request: PageRequest,
        status: Optional[SubscriptionStatus] = None,
    ) -> Tuple[List[Subscription], int]:
        """
        Page through all subscriptions, newest first.

        Returns:
            Tuple of (subscriptions on the page, total matching)
        """
        queryset = SubscriptionModel.objects.all()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        total = queryset.count()
        page = queryset.order_by("-created_at", "-id")[
            page_request.offset : page_request.offset + page_request.limit
        ]
        return [self._to_domain(model) for model in page], total

    @sync_to_async
    def find_overdue(self, now: datetime, limit: int) -> List[Subscription]:
        """
        Find ACTIVE subscriptions whose expires_at is before ``now``.

        Returns:
            List of Subscription entities, oldest expiry first
        """
        models = SubscriptionModel.objects.filter(status="active", expires_at__lt=now).order_by(
            "expires_at"
        )[:limit]
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def count_by_status(self) -> Dict[SubscriptionStatus, int]:
        """
        Count subscriptions per status.

        Returns:
            Mapping with an entry for every status
        """
        counts = {status: 0 for status in SubscriptionStatus}
        rows = SubscriptionModel.objects.order_by().values("status").annotate(total=Count("id"))
        for row in rows:
            counts[SubscriptionStatus(row["status"])] = row["total"]
        return counts

    @sync_to_async
    def total_active_revenue(self) -> Decimal:
        """
        Sum the pack prices of all ACTIVE subscriptions.

        Returns:
            Total as a Decimal
        """
        total = SubscriptionModel.objects.filter(status="active").aggregate(
            total=Sum("pack__price")
        )["total"]
        return Decimal(total or 0).quantize(Decimal("0.01"))

    @sync_to_async
    def find_recently_updated(self, limit: int) -> List[Subscription]:
        """
        Most recently updated subscriptions.

        Returns:
            List of Subscription entities, newest update first
        """
        models = SubscriptionModel.objects.order_by("-updated_at", "-id")[:limit]
        return [self._to_domain(model) for model in models]
