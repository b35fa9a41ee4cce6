"""
RemovePackCommand.

Command to soft-delete a pack.
"""
import uuid
from dataclasses import dataclass


@dataclass
class RemovePackCommand:
    """Command to remove a pack from the catalog."""

    pack_id: uuid.UUID
