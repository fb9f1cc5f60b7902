"""
Expense Tracking Models

Money paid out by a farm. An expense can be tied to a batch (per-batch
costing) or left at farm level, and can name the supplier that was paid.
Expenses feed the profit & loss report.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models


class ExpenseCategory(models.TextChoices):
    """Predefined expense categories for standardized tracking."""
    FEED = 'feed', 'Feed'
    MEDICINE = 'medicine', 'Medicine & Vaccines'
    EQUIPMENT = 'equipment', 'Equipment'
    UTILITIES = 'utilities', 'Utilities (Electricity, Water)'
    LABOR = 'labor', 'Labor & Wages'
    TRANSPORT = 'transport', 'Transport & Delivery'
    LIVESTOCK = 'livestock', 'Livestock Purchase'
    MAINTENANCE = 'maintenance', 'Maintenance & Repairs'
    MARKETING = 'marketing', 'Marketing'
    OTHER = 'other', 'Other'


class Expense(models.Model):
    """
    Individual expense record.

    Can be:
    - Batch-specific (linked to a batch for per-batch costing)
    - Farm-level (general overhead, not tied to a batch)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Ownership
    farm = models.ForeignKey(
        'farms.Farm',
        on_delete=models.CASCADE,
        related_name='expenses',
        help_text="Farm incurring this expense"
    )
    batch = models.ForeignKey(
        'livestock.Batch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses',
        help_text="Specific batch (leave blank for farm-level expenses)"
    )
    supplier = models.ForeignKey(
        'procurement.Supplier',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenses',
        help_text="Supplier that was paid"
    )

    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        db_index=True
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateField(db_index=True, help_text="Date expense was incurred")
    description = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['farm', 'date']),
            models.Index(fields=['farm', 'category']),
        ]

    def __str__(self):
        return f"{self.get_category_display()}: {self.amount} on {self.date}"

    def clean(self):
        errors = {}
        if self.amount is not None and self.amount < 0:
            errors['amount'] = 'Amount cannot be negative'
        if self.batch_id and self.farm_id and self.batch.farm_id != self.farm_id:
            errors['batch'] = 'Batch does not belong to this farm'
        if self.supplier_id and self.farm_id and self.supplier.farm_id != self.farm_id:
            errors['supplier'] = 'Supplier does not belong to this farm'
        if errors:
            raise ValidationError(errors)
