"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. The four families
(validation, not found, conflict, invalid state) are what the
API layer maps to HTTP status codes.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainException):
    """Raised when input violates a domain rule (malformed value)."""

    def __init__(self, message: str = "Invalid input", code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)


class InvalidPackError(ValidationError):
    """Raised when pack attributes are invalid."""

    def __init__(self, message: str = "Invalid subscription pack"):
        super().__init__(message, code="INVALID_PACK")


class InvalidPaginationError(ValidationError):
    """Raised when page or limit is out of range."""

    def __init__(self, message: str = "Invalid pagination parameters"):
        super().__init__(message, code="INVALID_PAGINATION")


class NotFoundError(DomainException):
    """Base exception for unknown packs, subscriptions and customers."""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class PackNotFoundError(NotFoundError):
    """Raised when a subscription pack is not found or is deleted."""

    def __init__(self, message: str = "Subscription pack not found"):
        super().__init__(message, code="PACK_NOT_FOUND")


class SubscriptionNotFoundError(NotFoundError):
    """Raised when a subscription is not found."""

    def __init__(self, message: str = "Subscription not found"):
        super().__init__(message, code="SUBSCRIPTION_NOT_FOUND")


class NoActiveSubscriptionError(NotFoundError):
    """Raised when a customer has no ACTIVE subscription."""

    def __init__(self, message: str = "No active subscription found"):
        super().__init__(message, code="NO_ACTIVE_SUBSCRIPTION")


class CustomerNotFoundError(NotFoundError):
    """Raised when a customer is not found."""

    def __init__(self, message: str = "Customer not found"):
        super().__init__(message, code="CUSTOMER_NOT_FOUND")


class ConflictError(DomainException):
    """Base exception for uniqueness violations."""

    def __init__(self, message: str = "Conflict", code: str = "CONFLICT"):
        super().__init__(message, code=code)


class DuplicateSkuError(ConflictError):
    """Raised when a SKU is already used by a non-deleted pack."""

    def __init__(self, message: str = "A subscription pack with this SKU already exists"):
        super().__init__(message, code="DUPLICATE_SKU")


class ActiveSubscriptionExistsError(ConflictError):
    """Raised when a customer already holds an ACTIVE subscription."""

    def __init__(self, message: str = "Customer already has an active subscription"):
        super().__init__(message, code="ACTIVE_SUBSCRIPTION_EXISTS")


class InvalidStateError(DomainException):
    """Base exception for transitions attempted from the wrong state."""

    def __init__(self, message: str = "Invalid state transition", code: str = "INVALID_STATE"):
        super().__init__(message, code=code)


class InvalidSubscriptionStatusError(InvalidStateError):
    """Raised when a subscription operation is invalid for the current status."""

    def __init__(self, message: str = "Subscription is not in requested status"):
        super().__init__(message, code="INVALID_SUBSCRIPTION_STATUS")
