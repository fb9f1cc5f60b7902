"""
Report Generation

Builds the five farm reports (profit & loss, inventory, sales, feed and
eggs) over a set of farms and a date range, plus the date range and fiscal
year helpers the report endpoints and saved report configs share.

Every report is a plain dict of JSON-safe values; the export module turns
the same dicts into CSV, XLSX and PDF files.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Optional, Tuple
import logging

from dateutil.relativedelta import relativedelta
from django.db.models import Sum
from django.db.models.functions import Coalesce

from core.exceptions import BusinessRuleError
from expenses.models import Expense
from feed_inventory.models import FeedRecord
from livestock.models import Batch, EggRecord
from sales_revenue.models import Sale

logger = logging.getLogger(__name__)


REPORT_TYPES = ('profit_loss', 'inventory', 'sales', 'feed', 'egg')
DATE_RANGE_TYPES = ('today', 'week', 'month', 'quarter', 'year', 'fiscal_year', 'custom')


class ReportError(BusinessRuleError):
    """Raised for an unknown report type or an unusable date range."""
    pass


# =============================================================================
# FISCAL YEAR HELPERS
# =============================================================================

def get_fiscal_year_start(value: date, start_month: int) -> date:
    """
    First day of the fiscal year containing ``value``.

    >>> get_fiscal_year_start(date(2025, 3, 15), 4)
    datetime.date(2024, 4, 1)
    >>> get_fiscal_year_start(date(2025, 4, 1), 4)
    datetime.date(2025, 4, 1)
    """
    year = value.year if value.month >= start_month else value.year - 1
    return date(year, start_month, 1)


def get_fiscal_year_end(value: date, start_month: int) -> date:
    """Last day of the fiscal year containing ``value``."""
    return get_fiscal_year_start(value, start_month) + relativedelta(years=1, days=-1)


def is_in_current_fiscal_year(value: date, start_month: int, today: Optional[date] = None) -> bool:
    today = today or date.today()
    return get_fiscal_year_start(today, start_month) <= value <= get_fiscal_year_end(today, start_month)


def get_fiscal_year_label(value: date, start_month: int) -> str:
    """'FY 2025' for calendar fiscal years, otherwise 'FY 2024/2025'."""
    start = get_fiscal_year_start(value, start_month)
    if start_month == 1:
        return f"FY {start.year}"
    return f"FY {start.year}/{start.year + 1}"


# =============================================================================
# DATE RANGES
# =============================================================================

def calculate_date_range(range_type: str, custom_start: Optional[date] = None,
                         custom_end: Optional[date] = None, fiscal_year_start_month: int = 1,
                         today: Optional[date] = None) -> Tuple[date, date]:
    """
    Resolve a named period to an inclusive (start, end) pair ending today.

    Raises:
        ReportError: unknown range type, or a custom range with missing or
            reversed dates
    """
    today = today or date.today()

    if range_type == 'today':
        return today, today
    if range_type == 'week':
        return today - timedelta(days=7), today
    if range_type == 'month':
        return today.replace(day=1), today
    if range_type == 'quarter':
        quarter_month = (today.month - 1) // 3 * 3 + 1
        return date(today.year, quarter_month, 1), today
    if range_type == 'year':
        return date(today.year, 1, 1), today
    if range_type == 'fiscal_year':
        return get_fiscal_year_start(today, fiscal_year_start_month), today
    if range_type == 'custom':
        if not custom_start or not custom_end:
            raise ReportError('Custom date range requires both start and end dates')
        if custom_start > custom_end:
            raise ReportError('Start date must be before or equal to end date')
        return custom_start, custom_end

    raise ReportError(f'Invalid date range. Must be one of: {", ".join(DATE_RANGE_TYPES)}')


def _period(start_date: date, end_date: date) -> Dict:
    return {'start_date': start_date.isoformat(), 'end_date': end_date.isoformat()}


# =============================================================================
# CALCULATIONS
# =============================================================================

def calculate_profit_margin(revenue, expenses) -> float:
    """Profit as a percentage of revenue, rounded to 1 decimal; 0 without revenue."""
    revenue = float(revenue)
    if revenue <= 0:
        return 0.0
    return round((revenue - float(expenses)) / revenue * 100, 1)


def calculate_inventory_mortality_rate(initial_quantity: int, current_quantity: int) -> float:
    """Share of the initial quantity no longer in the batch, rounded to 1 decimal."""
    if initial_quantity <= 0:
        return 0.0
    return round((initial_quantity - current_quantity) / initial_quantity * 100, 1)


def calculate_average_laying_percentage(total_collected: int, layer_birds: int, days: int) -> float:
    if layer_birds <= 0:
        return 0.0
    return round(total_collected / (layer_birds * max(days, 1)) * 100, 1)


def build_egg_inventory_rows(daily_rows):
    """
    Attach a running egg inventory to daily totals.

    ``daily_rows`` are dicts with date, collected, broken and sold. The
    inventory is accumulated oldest-first and the rows are returned
    newest-first.
    """
    running = 0
    rows = []
    for row in sorted(daily_rows, key=lambda r: r['date']):
        running += row['collected'] - row['broken'] - row['sold']
        rows.append({**row, 'inventory': running})
    rows.reverse()
    return rows


# =============================================================================
# REPORTS
# =============================================================================

def get_profit_loss_report(farm_ids, start_date: date, end_date: date) -> Dict:
    revenue_rows = Sale.objects.filter(
        farm_id__in=farm_ids, date__gte=start_date, date__lte=end_date
    ).values('livestock_type').annotate(amount=Sum('total_amount')).order_by('livestock_type')

    expense_rows = Expense.objects.filter(
        farm_id__in=farm_ids, date__gte=start_date, date__lte=end_date
    ).values('category').annotate(amount=Sum('amount')).order_by('category')

    total_revenue = sum((row['amount'] for row in revenue_rows), Decimal('0'))
    total_expenses = sum((row['amount'] for row in expense_rows), Decimal('0'))

    return {
        'report_type': 'profit_loss',
        'period': _period(start_date, end_date),
        'revenue': {
            'total': float(total_revenue),
            'by_type': [
                {'type': row['livestock_type'], 'amount': float(row['amount'])}
                for row in revenue_rows
            ],
        },
        'expenses': {
            'total': float(total_expenses),
            'by_category': [
                {'category': row['category'], 'amount': float(row['amount'])}
                for row in expense_rows
            ],
        },
        'profit': float(total_revenue - total_expenses),
        'profit_margin': calculate_profit_margin(total_revenue, total_expenses),
    }


def get_inventory_report(farm_ids, start_date: date = None, end_date: date = None) -> Dict:
    """Current stock per batch; the date range does not apply to a snapshot."""
    batches = Batch.objects.filter(farm_id__in=farm_ids).annotate(
        mortality_count=Coalesce(Sum('mortality_records__quantity'), 0)
    ).order_by('-acquisition_date')

    rows = []
    total_poultry = total_fish = total_mortality = total_initial = 0
    for batch in batches:
        rows.append({
            'id': str(batch.id),
            'species': batch.species,
            'livestock_type': batch.livestock_type,
            'initial_quantity': batch.initial_quantity,
            'current_quantity': batch.current_quantity,
            'mortality_count': batch.mortality_count,
            'mortality_rate': calculate_inventory_mortality_rate(batch.initial_quantity, batch.current_quantity),
            'status': batch.status,
        })
        if batch.status == Batch.STATUS_ACTIVE:
            if batch.livestock_type == 'poultry':
                total_poultry += batch.current_quantity
            elif batch.livestock_type == 'fish':
                total_fish += batch.current_quantity
        total_mortality += batch.mortality_count
        total_initial += batch.initial_quantity

    return {
        'report_type': 'inventory',
        'batches': rows,
        'summary': {
            'total_poultry': total_poultry,
            'total_fish': total_fish,
            'total_mortality': total_mortality,
            'overall_mortality_rate': round(total_mortality / total_initial * 100, 1) if total_initial else 0.0,
        },
    }


def get_sales_report(farm_ids, start_date: date, end_date: date) -> Dict:
    sales = Sale.objects.filter(
        farm_id__in=farm_ids, date__gte=start_date, date__lte=end_date
    ).select_related('customer').order_by('-date', '-created_at')

    rows = []
    by_type = {}
    total_revenue = Decimal('0')
    for sale in sales:
        rows.append({
            'id': str(sale.id),
            'date': sale.date.isoformat(),
            'livestock_type': sale.livestock_type,
            'quantity': sale.quantity,
            'unit_price': float(sale.unit_price),
            'total_amount': float(sale.total_amount),
            'customer_name': sale.customer.name if sale.customer else None,
        })
        entry = by_type.setdefault(sale.livestock_type, {'quantity': 0, 'revenue': Decimal('0')})
        entry['quantity'] += sale.quantity
        entry['revenue'] += sale.total_amount
        total_revenue += sale.total_amount

    return {
        'report_type': 'sales',
        'period': _period(start_date, end_date),
        'sales': rows,
        'summary': {
            'total_sales': len(rows),
            'total_revenue': float(total_revenue),
            'by_type': [
                {'type': livestock_type, 'quantity': entry['quantity'], 'revenue': float(entry['revenue'])}
                for livestock_type, entry in by_type.items()
            ],
        },
    }


def get_feed_report(farm_ids, start_date: date, end_date: date) -> Dict:
    grouped = FeedRecord.objects.filter(
        batch__farm_id__in=farm_ids, date__gte=start_date, date__lte=end_date
    ).values('batch_id', 'batch__species', 'feed_type').annotate(
        total_quantity_kg=Sum('quantity_kg'),
        total_cost=Sum('cost'),
    ).order_by('batch__species', 'feed_type')

    rows = []
    by_feed_type = {}
    total_kg = total_cost = Decimal('0')
    for row in grouped:
        rows.append({
            'batch_id': str(row['batch_id']),
            'species': row['batch__species'],
            'feed_type': row['feed_type'],
            'total_quantity_kg': float(row['total_quantity_kg']),
            'total_cost': float(row['total_cost']),
        })
        entry = by_feed_type.setdefault(row['feed_type'], {'quantity_kg': Decimal('0'), 'cost': Decimal('0')})
        entry['quantity_kg'] += row['total_quantity_kg']
        entry['cost'] += row['total_cost']
        total_kg += row['total_quantity_kg']
        total_cost += row['total_cost']

    return {
        'report_type': 'feed',
        'period': _period(start_date, end_date),
        'records': rows,
        'summary': {
            'total_feed_kg': float(total_kg),
            'total_cost': float(total_cost),
            'by_feed_type': [
                {'type': feed_type, 'quantity_kg': float(entry['quantity_kg']), 'cost': float(entry['cost'])}
                for feed_type, entry in by_feed_type.items()
            ],
        },
    }


def get_egg_report(farm_ids, start_date: date, end_date: date) -> Dict:
    daily = EggRecord.objects.filter(
        batch__farm_id__in=farm_ids, date__gte=start_date, date__lte=end_date
    ).values('date').annotate(
        collected=Sum('quantity_collected'),
        broken=Sum('quantity_broken'),
        sold=Sum('quantity_sold'),
    ).order_by('date')

    rows = build_egg_inventory_rows(
        {'date': row['date'], 'collected': row['collected'], 'broken': row['broken'], 'sold': row['sold']}
        for row in daily
    )
    for row in rows:
        row['date'] = row['date'].isoformat()

    layer_birds = Batch.objects.filter(
        farm_id__in=farm_ids,
        species__icontains='layer',
        status=Batch.STATUS_ACTIVE,
    ).aggregate(total=Coalesce(Sum('current_quantity'), 0))['total']

    total_collected = sum(row['collected'] for row in rows)
    return {
        'report_type': 'egg',
        'period': _period(start_date, end_date),
        'records': rows,
        'summary': {
            'total_collected': total_collected,
            'total_broken': sum(row['broken'] for row in rows),
            'total_sold': sum(row['sold'] for row in rows),
            'current_inventory': rows[0]['inventory'] if rows else 0,
            'average_laying_percentage': calculate_average_laying_percentage(
                total_collected, layer_birds, len(rows)
            ),
        },
    }


REPORT_BUILDERS = {
    'profit_loss': get_profit_loss_report,
    'inventory': get_inventory_report,
    'sales': get_sales_report,
    'feed': get_feed_report,
    'egg': get_egg_report,
}


def generate_report(report_type: str, farm_ids, start_date: date, end_date: date) -> Dict:
    """Build one report by type; raises ReportError for unknown types."""
    builder = REPORT_BUILDERS.get(report_type)
    if builder is None:
        raise ReportError(f'Invalid report type. Must be one of: {", ".join(REPORT_TYPES)}')
    report = builder(farm_ids, start_date, end_date)
    logger.info(f"Generated {report_type} report for {len(farm_ids)} farms ({start_date} to {end_date})")
    return report
