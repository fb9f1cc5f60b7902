"""
Summary Service

Inventory totals across a set of batches, and the dashboard payload that
combines them with alerts, recent mortality, upcoming vaccinations and
month-to-date money figures.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce

from expenses.models import Expense
from feed_inventory.models import FeedRecord
from livestock.models import Batch, MortalityRecord
from medication_management.models import VaccinationRecord
from medication_management.services import get_upcoming_vaccinations
from sales_revenue.models import Sale
from .alerts import AlertService, count_alerts


RECENT_MORTALITY_LIMIT = 5
UPCOMING_VACCINATION_DAYS = 7


def get_inventory_summary(batches, farm_ids=None) -> Dict:
    """
    Batch counts, animals on hand and investment, with feed and sales totals.

    Args:
        batches: Batch queryset already scoped to the caller's farms
        farm_ids: farms for the sales totals; defaults to sales from ``batches``
    """
    counts = batches.aggregate(
        total_batches=Count('id'),
        active_batches=Count('id', filter=Q(status=Batch.STATUS_ACTIVE)),
        depleted_batches=Count('id', filter=Q(status=Batch.STATUS_DEPLETED)),
        sold_batches=Count('id', filter=Q(status=Batch.STATUS_SOLD)),
        total_quantity=Coalesce(Sum('current_quantity', filter=Q(status=Batch.STATUS_ACTIVE)), 0),
        total_investment=Coalesce(Sum('total_cost'), Decimal('0')),
    )

    by_type = {}
    rows = batches.values('livestock_type').annotate(
        batches=Count('id'),
        active_batches=Count('id', filter=Q(status=Batch.STATUS_ACTIVE)),
        quantity=Coalesce(Sum('current_quantity', filter=Q(status=Batch.STATUS_ACTIVE)), 0),
        investment=Coalesce(Sum('total_cost'), Decimal('0')),
    ).order_by('livestock_type')
    for row in rows:
        by_type[row['livestock_type']] = {
            'batches': row['batches'],
            'active_batches': row['active_batches'],
            'quantity': row['quantity'],
            'investment': float(row['investment']),
        }

    feed = FeedRecord.objects.filter(batch__in=batches).aggregate(
        total_kg=Coalesce(Sum('quantity_kg'), Decimal('0')),
        total_cost=Coalesce(Sum('cost'), Decimal('0')),
    )

    sales = Sale.objects.filter(farm_id__in=farm_ids) if farm_ids is not None else Sale.objects.filter(batch__in=batches)
    sales = sales.aggregate(
        count=Count('id'),
        total_quantity=Coalesce(Sum('quantity'), 0),
        total_revenue=Coalesce(Sum('total_amount'), Decimal('0')),
    )

    return {
        'total_batches': counts['total_batches'],
        'active_batches': counts['active_batches'],
        'depleted_batches': counts['depleted_batches'],
        'sold_batches': counts['sold_batches'],
        'total_quantity': counts['total_quantity'],
        'total_investment': float(counts['total_investment']),
        'by_livestock_type': by_type,
        'feed': {
            'total_kg': float(feed['total_kg']),
            'total_cost': float(feed['total_cost']),
        },
        'sales': {
            'count': sales['count'],
            'total_quantity': sales['total_quantity'],
            'total_revenue': float(sales['total_revenue']),
        },
    }


class DashboardService:
    """Service for the farmer dashboard"""

    def __init__(self, user):
        self.user = user

    def get_month_to_date(self, farm_ids, today: date) -> Dict:
        month_start = today.replace(day=1)
        revenue = Sale.objects.filter(
            farm_id__in=farm_ids, date__gte=month_start, date__lte=today
        ).aggregate(total=Sum('total_amount'))['total'] or Decimal('0')
        expenses = Expense.objects.filter(
            farm_id__in=farm_ids, date__gte=month_start, date__lte=today
        ).aggregate(total=Sum('amount'))['total'] or Decimal('0')
        return {
            'start_date': month_start.isoformat(),
            'revenue': float(revenue),
            'expenses': float(expenses),
            'profit': float(revenue - expenses),
        }

    def get_dashboard(self, farm_ids, today: Optional[date] = None) -> Dict:
        """
        Dashboard payload for the given farms.

        Returns:
            dict: inventory, alerts, alert_counts, recent_mortality,
            upcoming_vaccinations and month_to_date
        """
        today = today or date.today()
        batches = Batch.objects.filter(farm_id__in=farm_ids)
        alerts = AlertService(self.user).get_alerts(farm_ids, today=today)

        recent_mortality = MortalityRecord.objects.filter(
            batch__farm_id__in=farm_ids
        ).select_related('batch').order_by('-date', '-created_at')[:RECENT_MORTALITY_LIMIT]

        vaccinations = VaccinationRecord.objects.filter(
            batch__farm_id__in=farm_ids,
            next_due_date__gte=today,
        ).select_related('batch').order_by('next_due_date')
        upcoming = get_upcoming_vaccinations(vaccinations, UPCOMING_VACCINATION_DAYS, today=today)

        return {
            'farm_count': len(farm_ids),
            'inventory': get_inventory_summary(batches, farm_ids),
            'alerts': alerts,
            'alert_counts': count_alerts(alerts),
            'recent_mortality': [
                {
                    'id': str(record.id),
                    'batch_id': str(record.batch_id),
                    'species': record.batch.species,
                    'quantity': record.quantity,
                    'cause': record.cause,
                    'date': record.date.isoformat(),
                }
                for record in recent_mortality
            ],
            'upcoming_vaccinations': [
                {
                    'id': str(record.id),
                    'batch_id': str(record.batch_id),
                    'species': record.batch.species,
                    'vaccine_name': record.vaccine_name,
                    'next_due_date': record.next_due_date.isoformat(),
                }
                for record in upcoming
            ],
            'month_to_date': self.get_month_to_date(farm_ids, today),
        }
