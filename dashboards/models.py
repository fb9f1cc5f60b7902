"""
Dashboard Models

Saved report configurations: a named report type and date range a user
can re-run or export for one farm.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from .reports import DATE_RANGE_TYPES, REPORT_TYPES


class ReportConfig(models.Model):
    """A saved report definition for a farm."""

    REPORT_TYPE_CHOICES = [
        ('profit_loss', 'Profit & Loss'),
        ('inventory', 'Inventory'),
        ('sales', 'Sales'),
        ('feed', 'Feed'),
        ('egg', 'Egg Production'),
    ]

    DATE_RANGE_CHOICES = [
        ('today', 'Today'),
        ('week', 'Last 7 Days'),
        ('month', 'This Month'),
        ('quarter', 'This Quarter'),
        ('year', 'This Year'),
        ('fiscal_year', 'This Fiscal Year'),
        ('custom', 'Custom'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='report_configs')

    name = models.CharField(max_length=100)
    report_type = models.CharField(max_length=20, choices=REPORT_TYPE_CHOICES)
    date_range_type = models.CharField(max_length=20, choices=DATE_RANGE_CHOICES, default='month')
    custom_start_date = models.DateField(null=True, blank=True)
    custom_end_date = models.DateField(null=True, blank=True)
    include_charts = models.BooleanField(default=True)
    include_details = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'report_configs'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.get_report_type_display()})"

    def clean(self):
        errors = {}
        if not (self.name or '').strip():
            errors['name'] = 'Report name is required'
        elif len(self.name) > 100:
            errors['name'] = 'Report name cannot exceed 100 characters'
        if self.report_type not in REPORT_TYPES:
            errors['report_type'] = 'Invalid report type'
        if self.date_range_type not in DATE_RANGE_TYPES:
            errors['date_range_type'] = 'Invalid date range type'
        elif self.date_range_type == 'custom':
            if not self.custom_start_date or not self.custom_end_date:
                errors['custom_start_date'] = 'Custom date range requires both start and end dates'
            elif self.custom_start_date > self.custom_end_date:
                errors['custom_end_date'] = 'Start date must be before or equal to end date'
        if errors:
            raise ValidationError(errors)
