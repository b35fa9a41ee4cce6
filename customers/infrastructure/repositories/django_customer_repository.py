"""
Django implementation of CustomerRepository port.
"""
import uuid

from asgiref.sync import sync_to_async

from customers.infrastructure.models import Customer as CustomerModel
from customers.ports.customer_repository import CustomerRepository


class DjangoCustomerRepository(CustomerRepository):
    """
    Django ORM implementation of CustomerRepository.
    """

    @sync_to_async
    def exists(self, customer_id: uuid.UUID) -> bool:
        """
        Check if a non-deleted customer exists.

        Args:
            customer_id: Customer UUID

        Returns:
            True if the customer exists, False otherwise
        """
        return CustomerModel.objects.filter(id=customer_id, deleted_at__isnull=True).exists()

    @sync_to_async
    def count(self) -> int:
        """
        Count non-deleted customers.

        Returns:
            Number of customers
        """
        return CustomerModel.objects.filter(deleted_at__isnull=True).count()
