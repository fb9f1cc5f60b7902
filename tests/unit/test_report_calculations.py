"""
Report helper unit tests: date ranges, fiscal years and derived figures.
"""

from datetime import date

import pytest

from core.pagination import calculate_total_pages
from dashboards.reports import (
    ReportError,
    build_egg_inventory_rows,
    calculate_average_laying_percentage,
    calculate_date_range,
    calculate_inventory_mortality_rate,
    calculate_profit_margin,
    get_fiscal_year_end,
    get_fiscal_year_label,
    get_fiscal_year_start,
    is_in_current_fiscal_year,
)


TODAY = date(2025, 5, 20)


class TestDateRanges:

    @pytest.mark.parametrize('range_type, expected_start', [
        ('today', date(2025, 5, 20)),
        ('week', date(2025, 5, 13)),
        ('month', date(2025, 5, 1)),
        ('quarter', date(2025, 4, 1)),
        ('year', date(2025, 1, 1)),
    ])
    def test_named_ranges_end_today(self, range_type, expected_start):
        assert calculate_date_range(range_type, today=TODAY) == (expected_start, TODAY)

    def test_fiscal_year_uses_start_month(self):
        start, end = calculate_date_range('fiscal_year', fiscal_year_start_month=7, today=TODAY)

        assert start == date(2024, 7, 1)
        assert end == TODAY

    def test_custom_range(self):
        start, end = date(2025, 1, 1), date(2025, 1, 31)

        assert calculate_date_range('custom', start, end, today=TODAY) == (start, end)

    def test_custom_range_single_day(self):
        day = date(2025, 3, 3)

        assert calculate_date_range('custom', day, day) == (day, day)

    def test_custom_range_errors(self):
        with pytest.raises(ReportError, match='requires both start and end dates'):
            calculate_date_range('custom', date(2025, 1, 1), None)
        with pytest.raises(ReportError, match='Start date must be before or equal to end date'):
            calculate_date_range('custom', date(2025, 2, 1), date(2025, 1, 1))

    def test_unknown_range(self):
        with pytest.raises(ReportError, match='Invalid date range'):
            calculate_date_range('decade', today=TODAY)


class TestFiscalYear:

    def test_start_before_and_after_start_month(self):
        assert get_fiscal_year_start(date(2025, 3, 15), 4) == date(2024, 4, 1)
        assert get_fiscal_year_start(date(2025, 4, 1), 4) == date(2025, 4, 1)

    def test_end(self):
        assert get_fiscal_year_end(date(2025, 3, 15), 4) == date(2025, 3, 31)
        assert get_fiscal_year_end(date(2025, 6, 1), 1) == date(2025, 12, 31)

    def test_labels(self):
        assert get_fiscal_year_label(date(2025, 6, 1), 1) == 'FY 2025'
        assert get_fiscal_year_label(date(2025, 6, 1), 7) == 'FY 2024/2025'
        assert get_fiscal_year_label(date(2025, 7, 1), 7) == 'FY 2025/2026'

    def test_current_fiscal_year(self):
        assert is_in_current_fiscal_year(date(2024, 7, 1), 7, today=TODAY)
        assert not is_in_current_fiscal_year(date(2024, 6, 30), 7, today=TODAY)


class TestFigures:

    def test_profit_margin(self):
        assert calculate_profit_margin(1000, 400) == 60.0
        assert calculate_profit_margin(1000, 1500) == -50.0
        assert calculate_profit_margin(0, 100) == 0.0

    def test_inventory_mortality_rate(self):
        assert calculate_inventory_mortality_rate(300, 250) == 16.7
        assert calculate_inventory_mortality_rate(0, 0) == 0.0

    def test_average_laying_percentage(self):
        assert calculate_average_laying_percentage(540, 100, 6) == 90.0
        assert calculate_average_laying_percentage(100, 0, 5) == 0.0

    def test_egg_inventory_rows(self):
        rows = build_egg_inventory_rows([
            {'date': date(2025, 5, 2), 'collected': 90, 'broken': 0, 'sold': 60},
            {'date': date(2025, 5, 1), 'collected': 80, 'broken': 2, 'sold': 50},
        ])

        assert [row['date'] for row in rows] == [date(2025, 5, 2), date(2025, 5, 1)]
        assert [row['inventory'] for row in rows] == [58, 28]

    @pytest.mark.parametrize('total, page_size, expected', [
        (0, 10, 0),
        (10, 10, 1),
        (25, 10, 3),
        (5, 0, 0),
    ])
    def test_total_pages(self, total, page_size, expected):
        assert calculate_total_pages(total, page_size) == expected
