"""
Unit tests for core value objects.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.domain.exceptions import InvalidPackError, InvalidPaginationError
from core.domain.value_objects import (
    PageRequest,
    Price,
    Sku,
    SubscriptionStatus,
    ValidityPeriod,
    add_months,
)


class TestAddMonths:
    """Tests for calendar month arithmetic."""

    def test_same_day_next_month(self):
        """Test the day of month is kept when it exists."""
        start = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2024, 4, 15, 9, 30, tzinfo=timezone.utc)

    def test_clamps_to_end_of_february_in_leap_year(self):
        """Test Jan 31 + 1 month is Feb 29 in a leap year."""
        start = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)

    def test_clamps_to_end_of_february(self):
        """Test Jan 31 + 1 month is Feb 28 outside leap years."""
        start = datetime(2023, 1, 31, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2023, 2, 28, tzinfo=timezone.utc)

    def test_crosses_year_boundary(self):
        """Test twelve months from mid-year lands in the next year."""
        start = datetime(2024, 6, 30, tzinfo=timezone.utc)
        assert add_months(start, 12) == datetime(2025, 6, 30, tzinfo=timezone.utc)

    def test_december_rollover(self):
        """Test month 12 wraps correctly."""
        start = datetime(2024, 11, 30, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2024, 12, 30, tzinfo=timezone.utc)
        assert add_months(start, 3) == datetime(2025, 2, 28, tzinfo=timezone.utc)

    def test_keeps_tzinfo(self):
        """Test the result stays timezone-aware."""
        start = datetime(2024, 5, 31, tzinfo=timezone.utc)
        assert add_months(start, 1).tzinfo is timezone.utc


class TestSku:
    """Tests for Sku value object."""

    def test_valid_sku_is_stripped(self):
        """Test surrounding whitespace is removed."""
        assert str(Sku("  premium-plan ")) == "premium-plan"

    def test_empty_sku(self):
        """Test an empty SKU is rejected."""
        with pytest.raises(InvalidPackError, match="SKU cannot be empty"):
            Sku("   ")

    def test_sku_too_long(self):
        """Test SKU length limit."""
        with pytest.raises(InvalidPackError, match="SKU too long"):
            Sku("x" * 101)

    def test_equality(self):
        """Test SKUs compare by value."""
        assert Sku("basic") == Sku(" basic ")


class TestPrice:
    """Tests for Price value object."""

    def test_normalises_to_two_places(self):
        """Test amounts are quantized to cents."""
        assert Price.of("10").amount == Decimal("10.00")
        assert str(Price.of(5)) == "5.00"

    def test_zero_is_allowed(self):
        """Test a free pack is valid."""
        assert Price.of("0").amount == Decimal("0.00")

    def test_negative_price(self):
        """Test negative prices are rejected."""
        with pytest.raises(InvalidPackError, match="negative"):
            Price.of("-1.00")

    def test_too_many_decimal_places(self):
        """Test sub-cent precision is rejected."""
        with pytest.raises(InvalidPackError, match="decimal places"):
            Price.of("9.999")

    def test_float_is_rejected(self):
        """Test binary floats are not accepted as prices."""
        with pytest.raises(InvalidPackError, match="float"):
            Price(9.99)

    def test_not_a_number(self):
        """Test garbage input is rejected."""
        with pytest.raises(InvalidPackError, match="Invalid price"):
            Price("abc")


class TestValidityPeriod:
    """Tests for ValidityPeriod value object."""

    @pytest.mark.parametrize("months", [1, 6, 12])
    def test_valid_range(self, months):
        """Test months inside 1..12 are accepted."""
        assert ValidityPeriod(months).months == months

    @pytest.mark.parametrize("months", [0, 13, -1])
    def test_out_of_range(self, months):
        """Test months outside 1..12 are rejected."""
        with pytest.raises(InvalidPackError, match="between 1 and 12"):
            ValidityPeriod(months)

    def test_boolean_is_rejected(self):
        """Test True is not accepted as one month."""
        with pytest.raises(InvalidPackError, match="integer"):
            ValidityPeriod(True)

    def test_expires_from(self):
        """Test expiry uses calendar months."""
        start = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)
        assert ValidityPeriod(1).expires_from(start) == datetime(
            2024, 2, 29, 12, 0, tzinfo=timezone.utc
        )


class TestPageRequest:
    """Tests for PageRequest value object."""

    def test_defaults(self):
        """Test default page and limit."""
        page_request = PageRequest()
        assert page_request.page == 1
        assert page_request.limit == 10
        assert page_request.offset == 0

    def test_offset(self):
        """Test offset is derived from page and limit."""
        assert PageRequest(page=3, limit=20).offset == 40

    def test_page_below_one(self):
        """Test page 0 is rejected."""
        with pytest.raises(InvalidPaginationError):
            PageRequest(page=0)

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_out_of_range(self, limit):
        """Test limit bounds."""
        with pytest.raises(InvalidPaginationError):
            PageRequest(limit=limit)


class TestSubscriptionStatus:
    """Tests for SubscriptionStatus enum."""

    def test_terminal_statuses(self):
        """Test INACTIVE and EXPIRED are terminal."""
        assert SubscriptionStatus.INACTIVE.is_terminal
        assert SubscriptionStatus.EXPIRED.is_terminal
        assert not SubscriptionStatus.ACTIVE.is_terminal

    def test_pending_statuses(self):
        """Test REQUESTED and APPROVED are pending."""
        assert SubscriptionStatus.REQUESTED.is_pending
        assert SubscriptionStatus.APPROVED.is_pending
        assert not SubscriptionStatus.ACTIVE.is_pending
