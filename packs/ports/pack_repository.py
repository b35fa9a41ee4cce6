"""
Pack repository port (interface).

This defines the contract for pack persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple
import uuid

from core.domain.value_objects import PageRequest
from packs.domain.pack import SubscriptionPack


class PackRepository(ABC):
    """
    Abstract repository for SubscriptionPack entities.

    Lookups return None for unknown packs; callers turn that into the
    error that fits their operation.
    """

    @abstractmethod
    async def save(self, pack: SubscriptionPack) -> SubscriptionPack:
        """
        Save a pack entity.

        Args:
            pack: SubscriptionPack entity to save

        Returns:
            Saved pack entity

        Raises:
            DuplicateSkuError: If another non-deleted pack holds the SKU
        """
        pass

    @abstractmethod
    async def find_by_id(
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
        pass

    @abstractmethod
    async def find_by_sku(self, sku: str) -> Optional[SubscriptionPack]:
        """
        Find a non-deleted pack by SKU.

        Args:
            sku: Pack SKU

        Returns:
            SubscriptionPack entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_ids(
        self, pack_ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, SubscriptionPack]:
        """
        Load several packs, deleted ones included, keyed by ID.

        Args:
            pack_ids: Pack UUIDs

        Returns:
            Mapping of pack ID to entity for the IDs that exist
        """
        pass

    @abstractmethod
    async def list(
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
        pass
