"""
Django implementation of PackRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Dict, Iterable, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.exceptions import DuplicateSkuError
from core.domain.value_objects import PackState, PageRequest, Price, Sku, ValidityPeriod
from packs.domain.pack import SubscriptionPack
from packs.infrastructure.models import SubscriptionPack as PackModel
from packs.ports.pack_repository import PackRepository


class DjangoPackRepository(PackRepository):
    """
    Django ORM implementation of PackRepository.

    The partial unique index on ``sku`` backs the SKU check done by the
    handlers; a lost race surfaces as DuplicateSkuError.
    """

    def _to_domain(self, model: PackModel) -> SubscriptionPack:
        """
        Convert Django model to domain entity.

        Args:
            model: Django SubscriptionPack model

        Returns:
            SubscriptionPack domain entity
        """
        return SubscriptionPack(
            id=model.id,
            name=model.name,
            description=model.description,
            sku=Sku(model.sku),
            price=Price(model.price),
            validity=ValidityPeriod(model.validity_months),
            state=PackState(model.state),
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
        )

    def _to_model(self, pack: SubscriptionPack) -> PackModel:
        """
        Convert domain entity to Django model.

        Args:
            pack: SubscriptionPack domain entity

        Returns:
            Django SubscriptionPack model (unsaved changes applied)
        """
        fields = {
            "name": pack.name,
            "description": pack.description,
            "sku": pack.sku.value,
            "price": pack.price.amount,
            "validity_months": pack.validity_months,
            "state": pack.state.value,
            "created_at": pack.created_at,
            "updated_at": pack.updated_at,
            "deleted_at": pack.deleted_at,
        }
        model = PackModel.objects.filter(id=pack.id).first()
        if model is None:
            return PackModel(id=pack.id, **fields)
        for name, value in fields.items():
            setattr(model, name, value)
        return model

    @sync_to_async
    def save(self, pack: SubscriptionPack) -> SubscriptionPack:
        """
        Save a pack entity.

        Args:
            pack: SubscriptionPack entity to save

        Returns:
            Saved pack entity
        """
        try:
            with transaction.atomic():
                model = self._to_model(pack)
                model.save()
        except IntegrityError:
            if PackModel.objects.filter(sku=pack.sku.value, state="active").exclude(id=pack.id).exists():
                raise DuplicateSkuError(
                    f"A subscription pack with SKU '{pack.sku}' already exists"
                ) from None
            raise
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(
        self, pack_id: uuid.UUID, include_deleted: bool = False
    ) -> Optional[SubscriptionPack]:
        """
        Find a pack by ID.

        Args:
            pack_id: Pack UUID
            include_deleted: Also return soft-deleted packs

        Returns:
            SubscriptionPack entity or None if not found
        """
        queryset = PackModel.objects.filter(id=pack_id)
        if not include_deleted:
            queryset = queryset.filter(state="active")
        model = queryset.first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_sku(self, sku: str) -> Optional[SubscriptionPack]:
        """
        Find a non-deleted pack by SKU.

        Args:
            sku: Pack SKU

        Returns:
            SubscriptionPack entity or None if not found
        """
        model = PackModel.objects.filter(sku=sku.strip(), state="active").first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_ids(
        self, pack_ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, SubscriptionPack]:
        """
        Load several packs, deleted ones included, keyed by ID.

        Args:
            pack_ids: Pack UUIDs

        Returns:
            Mapping of pack ID to entity
        """
        models = PackModel.objects.filter(id__in=set(pack_ids))
        return {model.id: self._to_domain(model) for model in models}

    @sync_to_async
    def list(
        self, page_request: PageRequest, exclude_deleted: bool = True
    ) -> Tuple[List[SubscriptionPack], int]:
        """
        List packs, newest first.

        Args:
            page_request: Page and limit
            exclude_deleted: Leave soft-deleted packs out

        Returns:
            Tuple of (packs on the page, total matching packs)
        """
        queryset = PackModel.objects.all()
        if exclude_deleted:
            queryset = queryset.filter(state="active")
        total = queryset.count()
        page = queryset.order_by("-created_at", "-id")[
            page_request.offset : page_request.offset + page_request.limit
        ]
        return [self._to_domain(model) for model in page], total
