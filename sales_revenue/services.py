"""
Sales Services

Batch stock bookkeeping for sales, sales summaries and customer rankings.

Every sale write that touches a batch locks the batch row first, so two
sales against the same batch cannot both pass the stock check.
"""

from decimal import Decimal
from typing import Dict, Iterable, List
import logging

from django.db import transaction
from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from livestock.models import Batch
from livestock.services import (
    InsufficientStockError,
    apply_quantity_change,
    calculate_new_quantity,
    lock_batch,
    restore_quantity,
)
from .models import Customer, Sale

logger = logging.getLogger(__name__)


TOP_CUSTOMERS_DEFAULT = 5


def calculate_sale_total(quantity, unit_price) -> Decimal:
    """Quantity times unit price; 0 for non-positive quantities or negative prices."""
    if quantity is None or unit_price is None or quantity <= 0 or unit_price < 0:
        return Decimal('0.00')
    return (Decimal(quantity) * Decimal(unit_price)).quantize(Decimal('0.01'))


# =============================================================================
# BATCH STOCK
# =============================================================================

def _deduct_from_batch(batch: Batch, quantity: int, available: int = None, requested: int = None) -> None:
    """
    Take ``quantity`` animals out of a locked batch.

    ``available`` and ``requested`` override the figures in the error
    message when an edited sale is checked against the stock it already holds.
    """
    if quantity > batch.current_quantity:
        available = batch.current_quantity if available is None else available
        requested = quantity if requested is None else requested
        logger.warning(
            f"Rejected sale of {quantity} from batch {batch.id} ({batch.current_quantity} in stock)"
        )
        raise InsufficientStockError(
            f"Insufficient stock in batch. Available: {available}, Requested: {requested}"
        )
    apply_quantity_change(batch, calculate_new_quantity(batch.current_quantity, quantity), sold=True)


# =============================================================================
# SALE MUTATIONS
# =============================================================================

@transaction.atomic
def create_sale(**fields) -> Sale:
    """
    Record a sale, drawing the batch down when the sale comes out of one.

    Egg sales never change the flock size.
    """
    sale = Sale(**fields)
    if sale.depletes_batch:
        batch = lock_batch(sale.batch_id)
        _deduct_from_batch(batch, sale.quantity)
        sale.batch = batch
    sale.save()

    logger.info(
        f"Recorded sale {sale.id}: {sale.quantity} {sale.livestock_type} for {sale.total_amount}"
        + (f", batch {sale.batch_id} now {sale.batch.current_quantity}" if sale.depletes_batch else "")
    )
    return sale


@transaction.atomic
def update_sale(sale: Sale, **fields) -> Sale:
    """
    Update a sale and move batch stock by (new - original) quantity.

    Moving a sale to another batch, or changing whether it depletes a batch,
    returns the original quantity in full and deducts the new one.
    """
    original = Sale.objects.select_for_update().get(pk=sale.pk)
    for field, value in fields.items():
        setattr(sale, field, value)

    if original.depletes_batch and sale.depletes_batch and original.batch_id == sale.batch_id:
        batch = lock_batch(sale.batch_id)
        difference = sale.quantity - original.quantity
        if difference > 0:
            _deduct_from_batch(
                batch, difference,
                available=batch.current_quantity + original.quantity,
                requested=sale.quantity,
            )
        elif difference < 0:
            restore_quantity(batch, -difference)
    else:
        if original.depletes_batch:
            restore_quantity(lock_batch(original.batch_id), original.quantity)
        if sale.depletes_batch:
            _deduct_from_batch(lock_batch(sale.batch_id), sale.quantity)

    sale.save()
    logger.info(f"Updated sale {sale.id}: {original.quantity} -> {sale.quantity}")
    return sale


@transaction.atomic
def delete_sale(sale: Sale) -> None:
    """Delete a sale and give its quantity back to the batch."""
    if sale.depletes_batch:
        batch = lock_batch(sale.batch_id)
        restore_quantity(batch, sale.quantity)
        logger.info(f"Restored {sale.quantity} to batch {batch.id} ({batch.current_quantity} now)")
    sale_id = sale.id
    sale.delete()
    logger.info(f"Deleted sale {sale_id}")


# =============================================================================
# SUMMARIES
# =============================================================================

def build_sales_summary(sales: Iterable[Sale]) -> Dict:
    """Count, quantity and revenue overall and per livestock type."""
    total = {'count': 0, 'quantity': 0, 'revenue': Decimal('0')}
    by_type = {}
    for sale in sales:
        entry = by_type.setdefault(sale.livestock_type, {'count': 0, 'quantity': 0, 'revenue': Decimal('0')})
        for bucket in (total, entry):
            bucket['count'] += 1
            bucket['quantity'] += sale.quantity
            bucket['revenue'] += sale.total_amount

    def as_json(bucket):
        return {**bucket, 'revenue': float(bucket['revenue'])}

    return {
        'total': as_json(total),
        'by_type': {livestock_type: as_json(entry) for livestock_type, entry in by_type.items()},
    }


def annotate_customer_totals(queryset):
    """Add ``total_spent`` and ``sales_count`` to a Customer queryset."""
    return queryset.annotate(
        total_spent=Coalesce(
            Sum('sales__total_amount'),
            Value(Decimal('0')),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        ),
        sales_count=Count('sales'),
    )


def get_top_customers(queryset, limit: int = TOP_CUSTOMERS_DEFAULT) -> List[Customer]:
    """Customers ranked by total spent, highest first."""
    return list(annotate_customer_totals(queryset).order_by('-total_spent', 'name')[:limit])
