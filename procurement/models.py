"""
Supplier Models

Suppliers of stock, feed, medicine and equipment, kept per farm. Batches
record the supplier they came from and expenses record who was paid.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from farms.models import Farm


class Supplier(models.Model):
    """
    A vendor a farm buys from.

    ``products`` is a free list of product names, e.g. ["day-old chicks", "starter feed"].
    """

    SUPPLIER_TYPE_CHOICES = [
        ('hatchery', 'Hatchery'),
        ('feed_mill', 'Feed Mill'),
        ('pharmacy', 'Pharmacy / Vet Supplies'),
        ('equipment', 'Equipment'),
        ('fingerlings', 'Fingerlings'),
        ('cattle_dealer', 'Cattle Dealer'),
        ('goat_dealer', 'Goat Dealer'),
        ('sheep_dealer', 'Sheep Dealer'),
        ('bee_supplier', 'Bee Supplier'),
        ('other', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='suppliers')

    name = models.CharField(max_length=255)
    supplier_type = models.CharField(max_length=20, choices=SUPPLIER_TYPE_CHOICES, default='other')
    products = models.JSONField(default=list, blank=True)

    # Contact
    phone = models.CharField(max_length=20)
    email = models.EmailField(blank=True)
    location = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']
        indexes = [
            models.Index(fields=['farm', 'supplier_type']),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_supplier_type_display()})"

    def clean(self):
        errors = {}
        if not (self.name or '').strip():
            errors['name'] = 'Supplier name is required'
        if not (self.phone or '').strip():
            errors['phone'] = 'Phone number is required'
        if not isinstance(self.products, list) or not all(isinstance(p, str) for p in self.products):
            errors['products'] = 'Products must be a list of names'
        if errors:
            raise ValidationError(errors)
