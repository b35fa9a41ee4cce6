"""
Pack catalog handlers.

Handlers for create, update and remove pack commands and for the
catalog queries.
"""
import logging

from core.application.pagination import PaginationDTO
from core.domain.clock import Clock, system_clock
from core.domain.exceptions import PackNotFoundError
from core.domain.value_objects import PageRequest
from core.infrastructure.events import event_bus
from packs.application.commands.create_pack import CreatePackCommand
from packs.application.commands.remove_pack import RemovePackCommand
from packs.application.commands.update_pack import UpdatePackCommand
from packs.application.dto.pack_dto import PackDTO, PackListDTO
from packs.application.queries.get_pack import GetPackQuery
from packs.application.queries.list_packs import ListPacksQuery
from packs.domain.events import PackCreated, PackRemoved, PackUpdated
from packs.domain.pack import SubscriptionPack
from packs.domain.services import SkuPolicy
from packs.ports.pack_repository import PackRepository

logger = logging.getLogger(__name__)


class CreatePackHandler:
    """Handler for CreatePackCommand."""

    def __init__(self, pack_repository: PackRepository, clock: Clock = system_clock):
        """Initialize handler with repository and clock."""
        self.pack_repository = pack_repository
        self.clock = clock

    async def handle(self, command: CreatePackCommand) -> PackDTO:
        """
        Handle create pack command.

        Args:
            command: CreatePackCommand

        Returns:
            PackDTO of the new pack

        Raises:
            InvalidPackError: If attributes are invalid
            DuplicateSkuError: If the SKU is taken by a non-deleted pack
        """
        now = self.clock.now()
        pack = SubscriptionPack.create(
            name=command.name,
            description=command.description,
            sku=command.sku,
            price=command.price,
            validity_months=command.validity_months,
            now=now,
        )

        holder = await self.pack_repository.find_by_sku(pack.sku.value)
        SkuPolicy.ensure_available(pack.sku.value, holder)

        saved = await self.pack_repository.save(pack)
        logger.info("Created pack %s", saved.sku, extra={"pack_id": str(saved.id)})

        await event_bus.publish(PackCreated(pack_id=saved.id, sku=saved.sku.value, occurred_at=now))

        return PackDTO.from_entity(saved)


class UpdatePackHandler:
    """Handler for UpdatePackCommand."""

    def __init__(self, pack_repository: PackRepository, clock: Clock = system_clock):
        """Initialize handler with repository and clock."""
        self.pack_repository = pack_repository
        self.clock = clock

    async def handle(self, command: UpdatePackCommand) -> PackDTO:
        """
        Handle update pack command.

        Args:
            command: UpdatePackCommand

        Returns:
            PackDTO of the updated pack

        Raises:
            PackNotFoundError: If the pack is unknown or deleted
            InvalidPackError: If new attributes are invalid
            DuplicateSkuError: If the new SKU collides with another pack
        """
        pack = await self.pack_repository.find_by_id(command.pack_id)
        if not pack:
            raise PackNotFoundError(f"Subscription pack {command.pack_id} not found")

        now = self.clock.now()
        updated = pack.update(
            now,
            name=command.name,
            description=command.description,
            sku=command.sku,
            price=command.price,
            validity_months=command.validity_months,
        )

        if updated.sku != pack.sku:
            holder = await self.pack_repository.find_by_sku(updated.sku.value)
            SkuPolicy.ensure_available(updated.sku.value, holder, pack_id=pack.id)

        saved = await self.pack_repository.save(updated)

        await event_bus.publish(PackUpdated(pack_id=saved.id, sku=saved.sku.value, occurred_at=now))

        return PackDTO.from_entity(saved)


class RemovePackHandler:
    """Handler for RemovePackCommand."""

    def __init__(self, pack_repository: PackRepository, clock: Clock = system_clock):
        """Initialize handler with repository and clock."""
        self.pack_repository = pack_repository
        self.clock = clock

    async def handle(self, command: RemovePackCommand) -> None:
        """
        Handle remove pack command.

        Existing subscriptions keep referencing the removed pack.

        Args:
            command: RemovePackCommand

        Raises:
            PackNotFoundError: If the pack is unknown or already deleted
        """
        pack = await self.pack_repository.find_by_id(command.pack_id)
        if not pack:
            raise PackNotFoundError(f"Subscription pack {command.pack_id} not found")

        now = self.clock.now()
        removed = await self.pack_repository.save(pack.remove(now))
        logger.info("Removed pack %s", removed.sku, extra={"pack_id": str(removed.id)})

        await event_bus.publish(PackRemoved(pack_id=removed.id, sku=removed.sku.value, occurred_at=now))


class GetPackHandler:
    """Handler for GetPackQuery."""

    def __init__(self, pack_repository: PackRepository):
        """Initialize handler with repository."""
        self.pack_repository = pack_repository

    async def handle(self, query: GetPackQuery) -> PackDTO:
        """
        Handle get pack query.

        Raises:
            PackNotFoundError: If the pack is unknown (or deleted and not requested)
        """
        pack = await self.pack_repository.find_by_id(
            query.pack_id, include_deleted=query.include_deleted
        )
        if not pack:
            raise PackNotFoundError(f"Subscription pack {query.pack_id} not found")
        return PackDTO.from_entity(pack)


class ListPacksHandler:
    """Handler for ListPacksQuery."""

    def __init__(self, pack_repository: PackRepository):
        """Initialize handler with repository."""
        self.pack_repository = pack_repository

    async def handle(self, query: ListPacksQuery) -> PackListDTO:
        """
        Handle list packs query.

        Args:
            query: ListPacksQuery

        Returns:
            PackListDTO, newest packs first
        """
        page_request = PageRequest(page=query.page, limit=query.limit)
        packs, total = await self.pack_repository.list(
            page_request, exclude_deleted=query.exclude_deleted
        )
        return PackListDTO(
            packs=[PackDTO.from_entity(pack) for pack in packs],
            pagination=PaginationDTO(page=page_request.page, limit=page_request.limit, total=total),
        )
