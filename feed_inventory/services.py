"""
Feed Services

Inventory bookkeeping for feed records, feed summaries and share codes for
saved formulations.

Feed records that draw from a FeedInventory row lock that row for the
duration of the write so concurrent deductions cannot oversell stock.
"""

from decimal import Decimal
from typing import Dict, Iterable
import logging
import secrets
import string

from django.db import transaction

from core.exceptions import BusinessRuleError
from .models import FeedInventory, FeedRecord, SavedFormulation

logger = logging.getLogger(__name__)


SHARE_CODE_LENGTH = 8
SHARE_CODE_ALPHABET = string.ascii_uppercase + string.digits


class InsufficientInventoryError(BusinessRuleError):
    """Raised when a feed record needs more feed than the inventory holds."""
    pass


# =============================================================================
# INVENTORY MUTATIONS
# =============================================================================

def _lock_inventory(inventory_id) -> FeedInventory:
    return FeedInventory.objects.select_for_update().get(pk=inventory_id)


def _deduct(inventory: FeedInventory, quantity_kg: Decimal) -> None:
    if quantity_kg > inventory.quantity_kg:
        logger.warning(
            f"Rejected feed deduction of {quantity_kg}kg from inventory {inventory.id} "
            f"({inventory.quantity_kg}kg available)"
        )
        raise InsufficientInventoryError(
            f"Insufficient inventory. Available: {inventory.quantity_kg}kg"
        )
    inventory.quantity_kg -= quantity_kg
    inventory.save(update_fields=['quantity_kg', 'updated_at'])


def _restore(inventory: FeedInventory, quantity_kg: Decimal) -> None:
    inventory.quantity_kg += quantity_kg
    inventory.save(update_fields=['quantity_kg', 'updated_at'])


@transaction.atomic
def create_feed_record(**fields) -> FeedRecord:
    """Create a feed record, deducting from its inventory row when one is given."""
    inventory = fields.get('inventory')
    if inventory is not None:
        inventory = _lock_inventory(inventory.pk)
        _deduct(inventory, fields['quantity_kg'])
        fields['inventory'] = inventory

    record = FeedRecord.objects.create(**fields)
    logger.info(
        f"Recorded feed {record.id}: {record.quantity_kg}kg on batch {record.batch_id}"
        + (f", inventory {inventory.id} now {inventory.quantity_kg}kg" if inventory else "")
    )
    return record


@transaction.atomic
def update_feed_record(record: FeedRecord, **fields) -> FeedRecord:
    """
    Update a feed record, moving the inventory by the change in quantity.

    Switching to a different inventory row restores the old row in full and
    deducts the new quantity from the new row.
    """
    original = FeedRecord.objects.select_for_update().get(pk=record.pk)
    new_inventory = fields.get('inventory', original.inventory)
    new_quantity = fields.get('quantity_kg', original.quantity_kg)

    if original.inventory_id and new_inventory is not None and original.inventory_id == new_inventory.pk:
        inventory = _lock_inventory(original.inventory_id)
        difference = new_quantity - original.quantity_kg
        if difference > 0:
            _deduct(inventory, difference)
        elif difference < 0:
            _restore(inventory, -difference)
    else:
        if original.inventory_id:
            _restore(_lock_inventory(original.inventory_id), original.quantity_kg)
        if new_inventory is not None:
            _deduct(_lock_inventory(new_inventory.pk), new_quantity)

    for field, value in fields.items():
        setattr(record, field, value)
    record.save()
    logger.info(f"Updated feed {record.id}: {original.quantity_kg}kg -> {record.quantity_kg}kg")
    return record


@transaction.atomic
def delete_feed_record(record: FeedRecord) -> None:
    """Delete a feed record and return its quantity to the inventory."""
    if record.inventory_id:
        _restore(_lock_inventory(record.inventory_id), record.quantity_kg)
    record_id = record.id
    record.delete()
    logger.info(f"Deleted feed {record_id}")


# =============================================================================
# SUMMARIES
# =============================================================================

def build_feed_summary(records: Iterable[FeedRecord]) -> Dict:
    """Totals and a per-feed-type breakdown of quantity and cost."""
    total_kg = Decimal('0')
    total_cost = Decimal('0')
    count = 0
    by_type = {}
    for record in records:
        total_kg += record.quantity_kg
        total_cost += record.cost
        count += 1
        entry = by_type.setdefault(record.feed_type, {'quantity_kg': Decimal('0'), 'cost': Decimal('0')})
        entry['quantity_kg'] += record.quantity_kg
        entry['cost'] += record.cost

    return {
        'total_quantity_kg': float(total_kg),
        'total_cost': float(total_cost),
        'record_count': count,
        'by_type': {
            feed_type: {'quantity_kg': float(v['quantity_kg']), 'cost': float(v['cost'])}
            for feed_type, v in by_type.items()
        },
    }


# =============================================================================
# SHARE CODES
# =============================================================================

def generate_share_code() -> str:
    return ''.join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(SHARE_CODE_LENGTH))


def assign_share_code(formulation: SavedFormulation) -> str:
    """Give a formulation a unique share code, regenerating on collision."""
    code = generate_share_code()
    while SavedFormulation.objects.filter(share_code=code).exclude(pk=formulation.pk).exists():
        code = generate_share_code()
    formulation.share_code = code
    formulation.save(update_fields=['share_code', 'updated_at'])
    logger.info(f"Generated share code for formulation {formulation.id}")
    return code
