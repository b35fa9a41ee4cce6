"""
Pack DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from core.application.pagination import PaginationDTO
from packs.domain.pack import SubscriptionPack


@dataclass
class PackDTO:
    """DTO for pack information."""

    id: uuid.UUID
    name: str
    description: str
    sku: str
    price: Decimal
    validity_months: int
    state: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime]

    @classmethod
    def from_entity(cls, pack: SubscriptionPack) -> "PackDTO":
        return cls(
            id=pack.id,
            name=pack.name,
            description=pack.description,
            sku=pack.sku.value,
            price=pack.price.amount,
            validity_months=pack.validity_months,
            state=pack.state.value,
            created_at=pack.created_at,
            updated_at=pack.updated_at,
            deleted_at=pack.deleted_at,
        )


@dataclass
class PackListDTO:
    """DTO for a page of packs."""

    packs: List[PackDTO]
    pagination: PaginationDTO
