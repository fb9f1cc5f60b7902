"""
Supplier Services
"""

from decimal import Decimal
import logging

from django.db.models import Sum

from core.exceptions import BusinessRuleError
from .models import Supplier

logger = logging.getLogger(__name__)


class SupplierInUseError(BusinessRuleError):
    """Raised when deleting a supplier that expenses still reference."""
    pass


def delete_supplier(supplier: Supplier) -> None:
    """Delete a supplier unless expenses were recorded against it."""
    if supplier.expenses.exists():
        logger.warning(f"Blocked delete of supplier {supplier.id}: expenses exist")
        raise SupplierInUseError('Cannot delete supplier with existing expenses')
    supplier_id = supplier.id
    supplier.delete()
    logger.info(f"Deleted supplier {supplier_id}")


def get_total_spent(supplier: Supplier) -> Decimal:
    """Sum of the supplier's expenses, to the cent."""
    total = supplier.expenses.aggregate(total=Sum('amount'))['total'] or Decimal('0')
    return total.quantize(Decimal('0.01'))
