"""
CreatePackCommand.

Command to add a subscription pack to the catalog.
"""
from dataclasses import dataclass
from decimal import Decimal


@dataclass
class CreatePackCommand:
    """Command to create a subscription pack."""

    name: str
    description: str
    sku: str
    price: Decimal
    validity_months: int
