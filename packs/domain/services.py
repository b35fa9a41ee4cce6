"""
Pack catalog domain services.
"""
import uuid
from typing import Optional

from core.domain.exceptions import DuplicateSkuError
from packs.domain.pack import SubscriptionPack


class SkuPolicy:
    """Domain service for SKU uniqueness among non-deleted packs."""

    @staticmethod
    def ensure_available(
        sku: str,
        holder: Optional[SubscriptionPack],
        pack_id: Optional[uuid.UUID] = None,
    ) -> None:
        """
        Check that ``sku`` may be used by the pack ``pack_id``.

        Args:
            sku: SKU being claimed
            holder: Non-deleted pack currently holding the SKU, if any
            pack_id: Pack claiming the SKU (None for a new pack)

        Raises:
            DuplicateSkuError: If another non-deleted pack holds the SKU
        """
        if holder is None or holder.is_deleted:
            return
        if pack_id is not None and holder.id == pack_id:
            return
        raise DuplicateSkuError(f"A subscription pack with SKU '{sku}' already exists")
