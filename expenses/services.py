"""
Expense Services

Totals used by the expenses summary endpoint and the profit & loss report.
"""

from decimal import Decimal
from typing import Dict, Iterable

from .models import Expense


def build_expense_summary(expenses: Iterable[Expense]) -> Dict:
    """Total amount, count and a per-category breakdown."""
    total = Decimal('0')
    count = 0
    by_category = {}
    for expense in expenses:
        total += expense.amount
        count += 1
        by_category[expense.category] = by_category.get(expense.category, Decimal('0')) + expense.amount

    return {
        'total': float(total),
        'count': count,
        'by_category': {category: float(amount) for category, amount in by_category.items()},
    }
