"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import calendar
from abc import ABC
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Union

from core.domain.exceptions import InvalidPackError, InvalidPaginationError

MIN_VALIDITY_MONTHS = 1
MAX_VALIDITY_MONTHS = 12
MAX_SKU_LENGTH = 100
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_CENTS = Decimal("0.01")


def add_months(moment: datetime, months: int) -> datetime:
    """
    Add calendar months to a datetime.

    The day of month is kept where it exists in the target month and
    clamped to that month's last day otherwise (Jan 31 + 1 month is
    Feb 28, or Feb 29 in a leap year). Time of day and tzinfo are kept.

    Args:
        moment: Starting point
        months: Number of months to add (may be negative)

    Returns:
        Shifted datetime
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Sku(ValueObject):
    """Stable, human-chosen pack identifier used for customer requests."""

    value: str

    def __post_init__(self):
        """Validate SKU format."""
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidPackError("SKU cannot be empty")
        if len(self.value) > MAX_SKU_LENGTH:
            raise InvalidPackError("SKU too long")
        object.__setattr__(self, "value", self.value.strip())

    def __str__(self) -> str:
        """Return SKU as string."""
        return self.value


@dataclass(frozen=True)
class Price(ValueObject):
    """Non-negative fixed-point price with two decimal places."""

    amount: Decimal

    def __post_init__(self):
        """Validate and normalise the amount."""
        if isinstance(self.amount, float):
            raise InvalidPackError("Price must be a decimal, not a float")
        try:
            amount = Decimal(self.amount)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidPackError(f"Invalid price: {self.amount}") from None
        if not amount.is_finite():
            raise InvalidPackError(f"Invalid price: {self.amount}")
        if amount < 0:
            raise InvalidPackError("Price cannot be negative")
        if amount != amount.quantize(_CENTS, rounding=ROUND_HALF_UP):
            raise InvalidPackError("Price cannot have more than 2 decimal places")
        object.__setattr__(self, "amount", amount.quantize(_CENTS))

    @classmethod
    def of(cls, value: Union[Decimal, str, int]) -> "Price":
        """Build a Price from a decimal, string or integer."""
        return cls(value if isinstance(value, Decimal) else Decimal(str(value)))

    def __str__(self) -> str:
        """Return price as string."""
        return str(self.amount)


@dataclass(frozen=True)
class ValidityPeriod(ValueObject):
    """Number of calendar months an ACTIVE subscription grants access."""

    months: int

    def __post_init__(self):
        """Validate month range."""
        if isinstance(self.months, bool) or not isinstance(self.months, int):
            raise InvalidPackError("Validity months must be an integer")
        if not MIN_VALIDITY_MONTHS <= self.months <= MAX_VALIDITY_MONTHS:
            raise InvalidPackError(
                f"Validity months must be between {MIN_VALIDITY_MONTHS} "
                f"and {MAX_VALIDITY_MONTHS}"
            )

    def expires_from(self, start: datetime) -> datetime:
        """Return the expiry moment for a window starting at ``start``."""
        return add_months(start, self.months)


@dataclass(frozen=True)
class PageRequest(ValueObject):
    """Validated page/limit pair."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    max_limit: int = MAX_PAGE_SIZE

    def __post_init__(self):
        """Validate page bounds."""
        if self.page < 1:
            raise InvalidPaginationError("Page must be at least 1")
        if not 1 <= self.limit <= self.max_limit:
            raise InvalidPaginationError(f"Limit must be between 1 and {self.max_limit}")

    @property
    def offset(self) -> int:
        """Number of rows to skip."""
        return (self.page - 1) * self.limit


class SubscriptionStatus(Enum):
    """Subscription status value object."""

    REQUESTED = "requested"
    APPROVED = "approved"
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

    @property
    def is_terminal(self) -> bool:
        """INACTIVE and EXPIRED records never change again."""
        return self in (SubscriptionStatus.INACTIVE, SubscriptionStatus.EXPIRED)

    @property
    def is_pending(self) -> bool:
        """Awaiting activation."""
        return self in (SubscriptionStatus.REQUESTED, SubscriptionStatus.APPROVED)


class PackState(Enum):
    """Catalog state of a subscription pack."""

    ACTIVE = "active"
    DELETED = "deleted"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


class SortOrder(Enum):
    """Sort direction for history queries."""

    ASC = "asc"
    DESC = "desc"

    def __str__(self) -> str:
        """Return sort order as string."""
        return self.value


class ApprovalPolicy(Enum):
    """What approving a REQUESTED subscription does."""

    AUTO_ACTIVATE = "auto_activate"
    APPROVE_ONLY = "approve_only"

    def __str__(self) -> str:
        """Return policy as string."""
        return self.value
