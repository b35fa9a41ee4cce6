"""
SubscriptionPack domain entity.

A pack is a purchasable plan definition: price, validity window and SKU.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from core.domain.exceptions import InvalidPackError
from core.domain.value_objects import PackState, Price, Sku, ValidityPeriod

MAX_NAME_LENGTH = 255


@dataclass(frozen=True)
class SubscriptionPack:
    """
    SubscriptionPack domain entity.

    Soft deletion is an explicit state; deleted packs stay readable for
    historical subscriptions but are never offered or assigned again.
    """

    id: uuid.UUID
    name: str
    description: str
    sku: Sku
    price: Price
    validity: ValidityPeriod
    state: PackState
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate pack entity."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidPackError("Pack name cannot be empty")
        if len(self.name) > MAX_NAME_LENGTH:
            raise InvalidPackError("Pack name too long")
        if not isinstance(self.description, str) or not self.description.strip():
            raise InvalidPackError("Pack description cannot be empty")
        if self.state == PackState.DELETED and self.deleted_at is None:
            raise ValueError("Deleted pack requires deleted_at")

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        sku: str,
        price: Union[Decimal, str, int],
        validity_months: int,
        now: datetime,
        pack_id: Optional[uuid.UUID] = None,
    ) -> "SubscriptionPack":
        """
        Create a new SubscriptionPack entity.

        Args:
            name: Display name
            description: Customer-facing description
            sku: Unique SKU among non-deleted packs
            price: Non-negative decimal price
            validity_months: Validity window, 1 to 12 months
            now: Creation time
            pack_id: Optional UUID (generated if not provided)

        Returns:
            SubscriptionPack entity instance

        Raises:
            InvalidPackError: If any attribute is invalid
        """
        return cls(
            id=pack_id or uuid.uuid4(),
            name=_clean(name),
            description=_clean(description),
            sku=Sku(sku),
            price=Price.of(price),
            validity=ValidityPeriod(validity_months),
            state=PackState.ACTIVE,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_deleted(self) -> bool:
        return self.state == PackState.DELETED

    @property
    def validity_months(self) -> int:
        return self.validity.months

    def expires_from(self, start: datetime) -> datetime:
        """Expiry moment of a subscription to this pack activated at ``start``."""
        return self.validity.expires_from(start)

    def update(
        self,
        now: datetime,
        name: Optional[str] = None,
        description: Optional[str] = None,
        sku: Optional[str] = None,
        price: Optional[Union[Decimal, str, int]] = None,
        validity_months: Optional[int] = None,
    ) -> "SubscriptionPack":
        """
        Create a new SubscriptionPack instance with the given fields changed.

        Fields left as None keep their current value.

        Returns:
            New SubscriptionPack instance
        """
        if self.is_deleted:
            raise ValueError("Cannot update a deleted pack")

        changes = {"updated_at": now}
        if name is not None:
            changes["name"] = _clean(name)
        if description is not None:
            changes["description"] = _clean(description)
        if sku is not None:
            changes["sku"] = Sku(sku)
        if price is not None:
            changes["price"] = Price.of(price)
        if validity_months is not None:
            changes["validity"] = ValidityPeriod(validity_months)
        return replace(self, **changes)

    def remove(self, now: datetime) -> "SubscriptionPack":
        """
        Create a new SubscriptionPack instance in the deleted state.

        Returns:
            New SubscriptionPack instance marked deleted
        """
        if self.is_deleted:
            raise ValueError("Pack is already deleted")
        return replace(self, state=PackState.DELETED, deleted_at=now, updated_at=now)


def _clean(value):
    return value.strip() if isinstance(value, str) else value
