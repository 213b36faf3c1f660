"""Tests for period analysis tools."""

from datetime import date

from services.aggregator import month_window
from tools.periods import get_monthly_totals, get_period_total
from tests.helpers import record_entries


class TestGetMonthlyTotals:
    """Tests for get_monthly_totals function."""

    def test_single_month_period(self, services, food):
        """Test getting the total for a single month."""
        jan_start, jan_end = month_window(2024, 1)
        record_entries(services, 100, food, [(jan_start, 500), (jan_end - 1, 250), (jan_end, 1000)])

        result = get_monthly_totals(services, 100, date(2024, 1, 15), date(2024, 1, 31))

        assert result == {"2024/01": 750}

    def test_months_without_spending_are_zero(self, services, food):
        """Test that empty months are reported as zero."""
        record_entries(
            services,
            100,
            food,
            [(month_window(2024, 1)[0], 100), (month_window(2024, 3)[0], 300)],
        )

        result = get_monthly_totals(services, 100, date(2024, 1, 1), date(2024, 3, 1))

        assert result == {"2024/01": 100, "2024/02": 0, "2024/03": 300}

    def test_period_crosses_year(self, services, food):
        """Test a period spanning December and January."""
        record_entries(
            services,
            100,
            food,
            [(month_window(2024, 12)[0], 10), (month_window(2025, 1)[0], 20)],
        )

        result = get_monthly_totals(services, 100, date(2024, 11, 1), date(2025, 1, 1))

        assert list(result) == ["2024/11", "2024/12", "2025/01"]
        assert result["2024/12"] == 10
        assert result["2025/01"] == 20

    def test_deleted_entries_excluded(self, services, food):
        """Test that soft-deleted entries do not count."""
        start, _ = month_window(2024, 5)
        _, dropped = record_entries(services, 100, food, [(start, 100), (start + 60, 900)])
        services.ledger.soft_delete(dropped.id, 100)

        result = get_monthly_totals(services, 100, date(2024, 5, 1), date(2024, 5, 1))

        assert result == {"2024/05": 100}

    def test_empty_when_end_before_start(self, services):
        """Test that an inverted period yields no months."""
        assert get_monthly_totals(services, 100, date(2024, 5, 1), date(2024, 4, 1)) == {}


class TestGetPeriodTotal:
    """Tests for get_period_total function."""

    def test_sum_of_months(self):
        assert get_period_total({"2024/01": 100, "2024/02": 0, "2024/03": 300}) == 400

    def test_empty(self):
        assert get_period_total({}) == 0
