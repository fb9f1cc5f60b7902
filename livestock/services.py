"""
Livestock Services

Batch quantity bookkeeping and the calculations behind batch, mortality,
weight and egg statistics.

Quantity changes that touch a batch from another record (mortality, sales)
run inside ``transaction.atomic()`` with the batch row locked, so concurrent
writes against the same batch serialize.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
import logging
import math

from django.db import transaction
from django.db.models import Count, Sum
from django.db.models.functions import Coalesce

from core.exceptions import BusinessRuleError
from .models import Batch, EggRecord, MortalityRecord, WeightSample

logger = logging.getLogger(__name__)


GROWTH_BASELINE_KG_PER_DAY = 0.04
DEFAULT_EXPECTED_ADG = 0.03

# Expected average daily gain in kg, keyed by lower-cased species
EXPECTED_ADG_BY_SPECIES = {
    'broiler': 0.05,
    'layer': 0.02,
    'catfish': 0.015,
    'tilapia': 0.01,
    'cattle': 0.8,
    'goats': 0.15,
    'sheep': 0.25,
    'bees': 0.001,
}

ATTENTION_LIMIT = 5


# =============================================================================
# EXCEPTIONS
# =============================================================================

class InsufficientStockError(BusinessRuleError):
    """Raised when a write would take more animals than a batch holds."""
    pass


class BatchHasRecordsError(BusinessRuleError):
    """Raised when deleting a batch that still has dependent records."""
    pass


# =============================================================================
# BATCH CALCULATIONS
# =============================================================================

def calculate_batch_total_cost(initial_quantity, cost_per_unit) -> Decimal:
    """Total acquisition cost; 0 for non-positive quantities or negative prices."""
    if initial_quantity <= 0 or cost_per_unit < 0:
        return Decimal('0.00')
    return (Decimal(initial_quantity) * Decimal(cost_per_unit)).quantize(Decimal('0.01'))


def determine_batch_status(current_quantity: int, sold_quantity: Optional[int] = None) -> str:
    """
    Suggest a status from the remaining quantity.

    >>> determine_batch_status(100)
    'active'
    >>> determine_batch_status(0)
    'depleted'
    >>> determine_batch_status(0, 100)
    'sold'
    """
    if sold_quantity is not None and sold_quantity > 0 and current_quantity == 0:
        return Batch.STATUS_SOLD
    return Batch.STATUS_DEPLETED if current_quantity <= 0 else Batch.STATUS_ACTIVE


def calculate_new_quantity(current_quantity: int, removed: int) -> int:
    """Quantity left after removing animals, never negative."""
    return max(0, current_quantity - removed)


def calculate_mortality_rate(initial_quantity, total_mortality) -> float:
    """Deaths as a percentage of the initial quantity."""
    if initial_quantity <= 0:
        return 0.0
    return total_mortality / initial_quantity * 100


def calculate_fcr(total_feed_kg, weight_gain_kg) -> Optional[float]:
    """Feed conversion ratio (kg feed per kg gained); lower is better."""
    total_feed_kg = float(total_feed_kg or 0)
    weight_gain_kg = float(weight_gain_kg or 0)
    if total_feed_kg <= 0 or weight_gain_kg <= 0:
        return None
    return round(total_feed_kg / weight_gain_kg, 2)


def calculate_performance_index(mortality_rate: float) -> float:
    return max(0.0, 100 - mortality_rate * 2)


def needs_attention(performance_index: float) -> bool:
    return performance_index < 90 or performance_index > 110


# =============================================================================
# BATCH QUANTITY MUTATIONS
# =============================================================================

def lock_batch(batch_id) -> Batch:
    """Fetch a batch with its row locked for the rest of the transaction."""
    return Batch.objects.select_for_update().get(pk=batch_id)


def apply_quantity_change(batch: Batch, new_quantity: int, sold: bool = False) -> Batch:
    """Write a new current quantity and the status it implies."""
    batch.current_quantity = max(0, new_quantity)
    if batch.current_quantity <= 0:
        batch.status = Batch.STATUS_SOLD if sold else Batch.STATUS_DEPLETED
    batch.save(update_fields=['current_quantity', 'status', 'updated_at'])
    return batch


def restore_quantity(batch: Batch, quantity: int) -> Batch:
    """
    Give animals back to a locked batch, capped at its initial quantity.

    A batch that has stock again is active, whether it was depleted or sold.
    """
    batch.current_quantity = min(batch.current_quantity + quantity, batch.initial_quantity)
    if batch.current_quantity > 0 and batch.status != Batch.STATUS_ACTIVE:
        batch.status = Batch.STATUS_ACTIVE
    batch.save(update_fields=['current_quantity', 'status', 'updated_at'])
    return batch


def delete_batch(batch: Batch) -> None:
    if batch.has_related_records():
        logger.warning(f"Blocked delete of batch {batch.id}: related records exist")
        raise BatchHasRecordsError(
            'Cannot delete batch with existing records. Delete related records first.'
        )
    batch_id = batch.id
    batch.delete()
    logger.info(f"Deleted batch {batch_id}")


@transaction.atomic
def record_mortality(batch_id, **fields) -> MortalityRecord:
    """Create a mortality record and draw the batch down by its quantity."""
    batch = lock_batch(batch_id)
    quantity = fields['quantity']
    if quantity > batch.current_quantity:
        logger.warning(
            f"Rejected mortality of {quantity} on batch {batch.id} "
            f"(current {batch.current_quantity})"
        )
        raise InsufficientStockError('Mortality quantity cannot exceed current batch quantity')

    record = MortalityRecord.objects.create(batch=batch, **fields)
    apply_quantity_change(batch, calculate_new_quantity(batch.current_quantity, quantity))
    logger.info(
        f"Recorded mortality {record.id}: {quantity} on batch {batch.id}, "
        f"{batch.current_quantity} remaining"
    )
    return record


@transaction.atomic
def update_mortality(record: MortalityRecord, **fields) -> MortalityRecord:
    """Update a mortality record, adjusting the batch by (original - new)."""
    batch = lock_batch(record.batch_id)
    original = MortalityRecord.objects.select_for_update().get(pk=record.pk).quantity
    new_quantity = fields.get('quantity', original)

    if new_quantity > batch.current_quantity + original:
        logger.warning(f"Rejected mortality update {record.id} on batch {batch.id}")
        raise InsufficientStockError('Mortality quantity cannot exceed current batch quantity')

    for field, value in fields.items():
        setattr(record, field, value)
    record.save()

    if new_quantity < original:
        restore_quantity(batch, original - new_quantity)
    elif new_quantity > original:
        apply_quantity_change(batch, calculate_new_quantity(batch.current_quantity, new_quantity - original))
    if new_quantity != original:
        logger.info(
            f"Updated mortality {record.id}: {original} -> {new_quantity} on batch {batch.id}"
        )
    return record


@transaction.atomic
def delete_mortality(record: MortalityRecord) -> None:
    """Delete a mortality record and give its quantity back to the batch."""
    batch = restore_quantity(lock_batch(record.batch_id), record.quantity)
    record_id = record.id
    record.delete()
    logger.info(f"Deleted mortality {record_id}: restored batch {batch.id} to {batch.current_quantity}")


# =============================================================================
# BATCH STATISTICS
# =============================================================================

def get_batch_stats(batch: Batch) -> Dict:
    """Mortality, feed, sales and growth figures for a single batch."""
    mortality = batch.mortality_records.aggregate(
        total=Coalesce(Sum('quantity'), 0),
        count=Count('id'),
    )
    feed = batch.feed_records.aggregate(
        total_kg=Coalesce(Sum('quantity_kg'), Decimal('0')),
        total_cost=Coalesce(Sum('cost'), Decimal('0')),
        count=Count('id'),
    )
    sales = batch.sales.aggregate(
        total_quantity=Coalesce(Sum('quantity'), 0),
        total_revenue=Coalesce(Sum('total_amount'), Decimal('0')),
        count=Count('id'),
    )

    samples = list(batch.weight_samples.order_by('date', 'created_at'))
    fcr = None
    if len(samples) >= 2 and feed['total_kg'] > 0:
        gain_per_head = samples[-1].average_weight_kg - samples[0].average_weight_kg
        fcr = calculate_fcr(feed['total_kg'], gain_per_head * batch.current_quantity)

    return {
        'mortality': {
            'total_deaths': mortality['count'],
            'total_quantity': mortality['total'],
            'rate': round(calculate_mortality_rate(batch.initial_quantity, mortality['total']), 2),
        },
        'feed': {
            'total_feedings': feed['count'],
            'total_kg': float(feed['total_kg']),
            'total_cost': float(feed['total_cost']),
            'fcr': fcr,
        },
        'sales': {
            'total_sales': sales['count'],
            'total_quantity': sales['total_quantity'],
            'total_revenue': float(sales['total_revenue']),
        },
        'current_weight': float(samples[-1].average_weight_kg) if samples else None,
    }


def get_batches_needing_attention(batches: Iterable[Batch]) -> List[Dict]:
    """
    Batches whose performance index strays from 100, worst first.

    The index is ``max(0, 100 - mortality_rate * 2)``; a batch is flagged
    when it falls below 90 or rises above 110.
    """
    flagged = []
    for batch in batches:
        total_mortality = batch.initial_quantity - batch.current_quantity
        rate = calculate_mortality_rate(batch.initial_quantity, total_mortality)
        index = calculate_performance_index(rate)
        if needs_attention(index):
            flagged.append({
                'id': str(batch.id),
                'batch_name': batch.batch_name,
                'species': batch.species,
                'livestock_type': batch.livestock_type,
                'farm_id': str(batch.farm_id),
                'current_quantity': batch.current_quantity,
                'initial_quantity': batch.initial_quantity,
                'mortality_rate': round(rate, 1),
                'performance_index': round(index, 1),
            })
    flagged.sort(key=lambda item: abs(item['performance_index'] - 100), reverse=True)
    return flagged[:ATTENTION_LIMIT]


# =============================================================================
# MORTALITY ANALYTICS
# =============================================================================

def calculate_cause_distribution(records: Iterable) -> List[Dict]:
    """
    Count, quantity and share of deaths per cause.

    ``records`` yields objects or dicts with ``cause`` and ``quantity``.
    """
    grouped = OrderedDict()
    total = 0
    for record in records:
        cause = record['cause'] if isinstance(record, dict) else record.cause
        quantity = record['quantity'] if isinstance(record, dict) else record.quantity
        entry = grouped.setdefault(cause, {'cause': cause, 'count': 0, 'quantity': 0})
        entry['count'] += 1
        entry['quantity'] += quantity
        total += quantity

    if total == 0:
        return []

    distribution = []
    for entry in grouped.values():
        entry['percentage'] = round(entry['quantity'] / total * 100, 1)
        distribution.append(entry)
    distribution.sort(key=lambda item: item['quantity'], reverse=True)
    return distribution


def trend_period_label(value: date, period: str) -> str:
    if period == 'weekly':
        iso_year, iso_week, _ = value.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if period == 'monthly':
        return value.strftime('%Y-%m')
    return value.isoformat()


def build_mortality_trends(records: Iterable, period: str = 'daily') -> List[Dict]:
    """Records and quantity per period, oldest period first."""
    grouped = {}
    for record in records:
        label = trend_period_label(record.date, period)
        entry = grouped.setdefault(label, {'period': label, 'records': 0, 'quantity': 0})
        entry['records'] += 1
        entry['quantity'] += record.quantity
    return [grouped[label] for label in sorted(grouped)]


def build_mortality_summary(records: Iterable, critical_alerts: int, total_alerts: int) -> Dict:
    records = list(records)
    return {
        'total_deaths': sum(r.quantity for r in records),
        'record_count': len(records),
        'critical_alerts': critical_alerts,
        'total_alerts': total_alerts,
    }


# =============================================================================
# GROWTH
# =============================================================================

def get_expected_adg(species: str) -> float:
    return EXPECTED_ADG_BY_SPECIES.get((species or '').lower(), DEFAULT_EXPECTED_ADG)


def determine_growth_status(daily_gain: float) -> str:
    """Compare daily gain against the 0.04 kg/day baseline."""
    ratio = daily_gain / GROWTH_BASELINE_KG_PER_DAY
    if ratio < 0.7:
        return 'slow'
    if ratio > 1.3:
        return 'rapid'
    return 'normal'


def build_weight_stats(samples: List[WeightSample], species: str = '') -> Dict:
    """
    Growth statistics over weight samples ordered oldest first.

    Returns average weight, total gain (latest minus first), daily gain
    (None when all samples share a date), record count, days between the
    first and latest sample, growth status and the expected gain for the
    species.
    """
    expected_adg = get_expected_adg(species)
    if not samples:
        return {
            'average_weight': 0,
            'total_gain': 0,
            'daily_gain': None,
            'record_count': 0,
            'days_between': None,
            'growth_status': None,
            'expected_adg': expected_adg,
        }

    first, latest = samples[0], samples[-1]
    average = sum(float(s.average_weight_kg) for s in samples) / len(samples)
    total_gain = float(latest.average_weight_kg) - float(first.average_weight_kg)
    days_between = (latest.date - first.date).days
    daily_gain = total_gain / days_between if days_between > 0 else None

    return {
        'average_weight': round(average, 3),
        'total_gain': round(total_gain, 3),
        'daily_gain': round(daily_gain, 3) if daily_gain is not None else None,
        'record_count': len(samples),
        'days_between': math.ceil(days_between),
        'growth_status': determine_growth_status(daily_gain) if daily_gain is not None else None,
        'expected_adg': expected_adg,
    }


# =============================================================================
# EGGS
# =============================================================================

def build_egg_summary(records: Iterable[EggRecord]) -> Dict:
    totals = {'total_collected': 0, 'total_broken': 0, 'total_sold': 0, 'record_count': 0}
    for record in records:
        totals['total_collected'] += record.quantity_collected
        totals['total_broken'] += record.quantity_broken
        totals['total_sold'] += record.quantity_sold
        totals['record_count'] += 1
    totals['current_inventory'] = max(
        0, totals['total_collected'] - totals['total_broken'] - totals['total_sold']
    )
    return totals


def calculate_laying_percentage(eggs_collected: int, flock_size: int) -> float:
    """Eggs per bird as a percentage, capped at 100."""
    if flock_size <= 0 or eggs_collected < 0:
        return 0.0
    return round(min(eggs_collected / flock_size * 100, 100.0), 2)
