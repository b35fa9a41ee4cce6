"""
GetPackQuery.

Query to load a single pack by ID.
"""
import uuid
from dataclasses import dataclass


@dataclass
class GetPackQuery:
    """Query to get a pack."""

    pack_id: uuid.UUID
    include_deleted: bool = False
