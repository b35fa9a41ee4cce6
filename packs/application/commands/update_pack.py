"""
UpdatePackCommand.

Command to change attributes of an existing pack.
"""
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class UpdatePackCommand:
    """Command to update a pack. Fields left as None are unchanged."""

    pack_id: uuid.UUID
    name: Optional[str] = None
    description: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Decimal] = None
    validity_months: Optional[int] = None
