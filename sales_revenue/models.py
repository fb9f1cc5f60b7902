"""
Sales & Customer Models

Sales of livestock and livestock products, optionally drawn from a batch,
and the customers who buy them.
"""

from decimal import Decimal
import uuid

from django.core.exceptions import ValidationError
from django.db import models


class Customer(models.Model):
    """
    A buyer of livestock or produce from one farm.
    """
    CUSTOMER_TYPE_CHOICES = [
        ('individual', 'Individual'),
        ('restaurant', 'Restaurant'),
        ('retailer', 'Retailer'),
        ('wholesaler', 'Wholesaler'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='customers')

    # Basic Information
    name = models.CharField(max_length=255)
    customer_type = models.CharField(max_length=20, choices=CUSTOMER_TYPE_CHOICES, default='individual')

    # Contact Information
    phone = models.CharField(max_length=20)
    email = models.EmailField(blank=True)
    location = models.CharField(max_length=500, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['name']
        indexes = [
            models.Index(fields=['farm', 'phone']),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        errors = {}
        if not (self.name or '').strip():
            errors['name'] = 'Customer name is required'
        if not (self.phone or '').strip():
            errors['phone'] = 'Phone number is required'
        if errors:
            raise ValidationError(errors)


class Sale(models.Model):
    """
    A sale of livestock or produce.

    Sales linked to a batch draw the batch down by the quantity sold, except
    egg sales, which leave the flock size unchanged.
    """
    LIVESTOCK_TYPE_CHOICES = [
        ('poultry', 'Poultry'),
        ('fish', 'Fish'),
        ('eggs', 'Eggs'),
        ('cattle', 'Cattle'),
        ('goats', 'Goats'),
        ('sheep', 'Sheep'),
        ('honey', 'Honey'),
        ('milk', 'Milk'),
        ('wool', 'Wool'),
        ('beeswax', 'Beeswax'),
        ('propolis', 'Propolis'),
        ('royal_jelly', 'Royal Jelly'),
        ('manure', 'Manure'),
    ]

    UNIT_TYPE_CHOICES = [
        ('bird', 'Bird'),
        ('kg', 'Kilogram'),
        ('crate', 'Crate'),
        ('piece', 'Piece'),
        ('liter', 'Liter'),
        ('head', 'Head'),
        ('dozen', 'Dozen'),
        ('jar', 'Jar'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('paid', 'Paid'),
        ('pending', 'Pending'),
        ('partial', 'Partial'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('transfer', 'Bank Transfer'),
        ('credit', 'Credit'),
    ]

    # Products that are harvested from a batch rather than taken out of it
    NON_DEPLETING_TYPES = ('eggs',)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey('farms.Farm', on_delete=models.CASCADE, related_name='sales')
    batch = models.ForeignKey(
        'livestock.Batch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales',
        help_text="Batch the animals or produce came from"
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales'
    )

    # What was sold
    livestock_type = models.CharField(max_length=20, choices=LIVESTOCK_TYPE_CHOICES, db_index=True)
    quantity = models.PositiveIntegerField()
    unit_type = models.CharField(max_length=10, choices=UNIT_TYPE_CHOICES, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    date = models.DateField()

    # Payment
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='paid')
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, blank=True)

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sales'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['farm', 'date']),
            models.Index(fields=['batch']),
        ]

    def __str__(self):
        return f"{self.quantity} {self.get_livestock_type_display()} on {self.date}"

    @property
    def depletes_batch(self):
        return self.batch_id is not None and self.livestock_type not in self.NON_DEPLETING_TYPES

    def save(self, *args, **kwargs):
        self.total_amount = Decimal(self.quantity or 0) * Decimal(self.unit_price or 0)
        super().save(*args, **kwargs)

    def clean(self):
        errors = {}
        if self.quantity is not None and self.quantity <= 0:
            errors['quantity'] = 'Quantity must be greater than 0'
        if self.unit_price is not None and self.unit_price < 0:
            errors['unit_price'] = 'Unit price cannot be negative'
        if errors:
            raise ValidationError(errors)
