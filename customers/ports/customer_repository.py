"""
Customer repository port (interface).

Customers are managed elsewhere; the subscription core only needs to
know whether one exists and how many there are.
"""
from abc import ABC, abstractmethod
import uuid


class CustomerRepository(ABC):
    """
    Abstract read-only repository for customers.
    """

    @abstractmethod
    async def exists(self, customer_id: uuid.UUID) -> bool:
        """
        Check if a non-deleted customer exists.

        Args:
            customer_id: Customer UUID

        Returns:
            True if the customer exists, False otherwise
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """
        Count non-deleted customers.

        Returns:
            Number of customers
        """
        pass
