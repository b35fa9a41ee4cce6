"""
ListPacksQuery.

Query to page through the catalog, newest first.
"""
from dataclasses import dataclass

from core.domain.value_objects import DEFAULT_PAGE_SIZE


@dataclass
class ListPacksQuery:
    """Query to list packs."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    exclude_deleted: bool = True
