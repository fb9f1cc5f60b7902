"""
Health Services

Vaccination summaries, upcoming doses and treatment withdrawal periods.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional


def calculate_compliance_rate(total: int, completed: int) -> float:
    """Completed share of all vaccinations, clamped to 0-100; 100 when there are none."""
    if total <= 0:
        return 100.0
    return min(100.0, max(0.0, completed / total * 100))


def build_vaccination_summary(records: Iterable, today: Optional[date] = None) -> Dict:
    """
    Count vaccinations by follow-up state.

    Records without a next due date are completed; the rest are overdue
    (due before today) or upcoming (due today or later).
    """
    today = today or date.today()
    total = completed = overdue = upcoming = 0
    for record in records:
        total += 1
        if record.next_due_date is None:
            completed += 1
        elif record.next_due_date < today:
            overdue += 1
        else:
            upcoming += 1

    return {
        'total': total,
        'completed': completed,
        'scheduled': overdue + upcoming,
        'overdue': overdue,
        'upcoming': upcoming,
        'compliance_rate': round(calculate_compliance_rate(total, completed), 1),
    }


def get_upcoming_vaccinations(records: Iterable, days_ahead: int, today: Optional[date] = None) -> List:
    """Records whose next dose falls between today and ``days_ahead`` days from now."""
    if days_ahead <= 0:
        return []
    today = today or date.today()
    horizon = today + timedelta(days=days_ahead)
    return [
        record for record in records
        if record.next_due_date is not None and today <= record.next_due_date <= horizon
    ]


def withdrawal_end_date(treatment_date: date, withdrawal_days: int) -> date:
    return treatment_date + timedelta(days=max(0, withdrawal_days))


def is_in_withdrawal_period(treatment_date: date, withdrawal_days: int, today: Optional[date] = None) -> bool:
    """True while today is on or before the end of the withdrawal period."""
    if withdrawal_days <= 0:
        return False
    today = today or date.today()
    return today <= withdrawal_end_date(treatment_date, withdrawal_days)


def days_remaining_in_withdrawal(treatment_date: date, withdrawal_days: int, today: Optional[date] = None) -> int:
    """Whole days until the withdrawal period ends, never negative."""
    if withdrawal_days <= 0:
        return 0
    today = today or date.today()
    remaining = (withdrawal_end_date(treatment_date, withdrawal_days) - today).days
    return max(0, remaining)


def vaccination_row(record) -> Dict:
    return {
        'id': str(record.id),
        'type': 'vaccination',
        'batch': str(record.batch_id),
        'batch_species': record.batch.species,
        'farm': str(record.batch.farm_id),
        'name': record.vaccine_name,
        'date': record.date_administered.isoformat(),
        'dosage': record.dosage,
        'next_due_date': record.next_due_date.isoformat() if record.next_due_date else None,
        'reason': None,
        'withdrawal_days': None,
        'notes': record.notes,
    }


def treatment_row(record) -> Dict:
    return {
        'id': str(record.id),
        'type': 'treatment',
        'batch': str(record.batch_id),
        'batch_species': record.batch.species,
        'farm': str(record.batch.farm_id),
        'name': record.medication_name,
        'date': record.date.isoformat(),
        'dosage': record.dosage,
        'next_due_date': None,
        'reason': record.reason,
        'withdrawal_days': record.withdrawal_days,
        'notes': record.notes,
    }
