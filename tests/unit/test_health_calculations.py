"""
Vaccination and treatment withdrawal unit tests.
"""

from datetime import date, timedelta
from types import SimpleNamespace

from medication_management.services import (
    build_vaccination_summary,
    calculate_compliance_rate,
    days_remaining_in_withdrawal,
    get_upcoming_vaccinations,
    is_in_withdrawal_period,
    withdrawal_end_date,
)


TODAY = date(2025, 6, 15)


def vaccination(days_until_due):
    due = TODAY + timedelta(days=days_until_due) if days_until_due is not None else None
    return SimpleNamespace(next_due_date=due)


class TestVaccinations:

    def test_compliance_rate(self):
        assert calculate_compliance_rate(4, 3) == 75.0
        assert calculate_compliance_rate(0, 0) == 100.0
        assert calculate_compliance_rate(2, 5) == 100.0

    def test_summary(self):
        summary = build_vaccination_summary(
            [vaccination(None), vaccination(-1), vaccination(0), vaccination(10)],
            today=TODAY,
        )

        assert summary == {
            'total': 4,
            'completed': 1,
            'scheduled': 3,
            'overdue': 1,
            'upcoming': 2,
            'compliance_rate': 25.0,
        }

    def test_upcoming_window(self):
        records = [vaccination(-1), vaccination(0), vaccination(7), vaccination(8), vaccination(None)]

        upcoming = get_upcoming_vaccinations(records, 7, today=TODAY)

        assert [r.next_due_date for r in upcoming] == [TODAY, TODAY + timedelta(days=7)]
        assert get_upcoming_vaccinations(records, 0, today=TODAY) == []


class TestWithdrawal:

    def test_end_date(self):
        assert withdrawal_end_date(date(2025, 6, 1), 10) == date(2025, 6, 11)

    def test_in_withdrawal_until_end_date(self):
        treated = date(2025, 6, 5)

        assert is_in_withdrawal_period(treated, 10, today=TODAY)
        assert not is_in_withdrawal_period(treated, 9, today=TODAY)
        assert not is_in_withdrawal_period(treated, 0, today=TODAY)

    def test_days_remaining(self):
        assert days_remaining_in_withdrawal(date(2025, 6, 10), 14, today=TODAY) == 9
        assert days_remaining_in_withdrawal(date(2025, 5, 1), 14, today=TODAY) == 0
