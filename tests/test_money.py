"""Tests for money formatting and month/year helpers."""

import pytest
from datetime import datetime
from decimal import Decimal

from jarbook.engine.money import (
    buddhist_year,
    clamp,
    format_currency,
    in_month,
    in_year,
    month_label,
    next_month,
    percent_of,
    previous_month,
    year_label,
    yearly_projection,
)


class TestFormatCurrency:
    """Tests for currency formatting."""

    def test_thousands_and_decimals(self):
        assert format_currency(Decimal("1234567.891")) == "฿1,234,567.89"

    def test_zero_decimals_rounds_half_up(self):
        assert format_currency(Decimal("1234.5"), decimals=0) == "฿1,235"

    def test_negative_amount(self):
        assert format_currency(Decimal("-50")) == "-฿50.00"

    def test_custom_symbol(self):
        assert format_currency(Decimal("10"), symbol="$") == "$10.00"


class TestPercentOf:
    """Tests for the zero-guarded percentage helper."""

    def test_normal(self):
        assert percent_of(Decimal("200"), Decimal("800")) == Decimal("25")

    def test_zero_whole(self):
        """Test that a zero base yields 0 instead of raising."""
        assert percent_of(Decimal("5"), Decimal("0")) == Decimal("0")

    def test_clamp(self):
        assert clamp(Decimal("12"), Decimal("0"), Decimal("10")) == Decimal("10")
        assert clamp(Decimal("-1"), Decimal("0"), Decimal("10")) == Decimal("0")
        assert clamp(Decimal("5"), Decimal("0"), Decimal("10")) == Decimal("5")


class TestCalendar:
    """Tests for month/year matching and navigation."""

    def test_in_month(self):
        moment = datetime(2025, 1, 31, 23, 59)
        assert in_month(moment, 1, 2025)
        assert not in_month(moment, 2, 2025)
        assert not in_month(moment, 1, 2024)

    def test_in_year(self):
        assert in_year(datetime(2025, 6, 1), 2025)
        assert not in_year(datetime(2024, 12, 31), 2025)

    def test_previous_month_wraps_year(self):
        assert previous_month(1, 2025) == (12, 2024)
        assert previous_month(7, 2025) == (6, 2025)

    def test_next_month_wraps_year(self):
        assert next_month(12, 2024) == (1, 2025)
        assert next_month(3, 2025) == (4, 2025)

    @pytest.mark.parametrize("month", range(1, 13))
    def test_navigation_round_trip(self, month):
        """Test that next undoes previous for every month."""
        assert next_month(*previous_month(month, 2025)) == (month, 2025)


class TestThaiLabels:
    """Tests for Thai month headers."""

    def test_buddhist_year(self):
        assert buddhist_year(2025) == 2568

    def test_month_label(self):
        assert month_label(1, 2025) == "มกราคม 2568"
        assert month_label(12, 2024) == "ธันวาคม 2567"

    def test_year_label(self):
        assert year_label(2025) == "ปี 2568"

    def test_yearly_projection(self):
        assert yearly_projection(Decimal("1500")) == Decimal("18000")
