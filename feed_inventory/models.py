"""
Feed Inventory Management Models

Tracks feed given to batches, feed stock held per farm, and saved feed
formulations that can be shared publicly by code.

Models:
    - FeedInventory: Current stock level per farm and feed type
    - FeedRecord: Feed given to a batch, optionally drawn from inventory
    - SavedFormulation: A user's saved ration recipe
    - SharedLookupRateLimit: Per-client counters for the public share lookup
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


FEED_TYPE_CHOICES = [
    ('starter', 'Starter'),
    ('grower', 'Grower'),
    ('finisher', 'Finisher'),
    ('layer_mash', 'Layer Mash'),
    ('fish_feed', 'Fish Feed'),
    ('cattle_feed', 'Cattle Feed'),
    ('goat_feed', 'Goat Feed'),
    ('sheep_feed', 'Sheep Feed'),
    ('hay', 'Hay'),
    ('silage', 'Silage'),
    ('bee_feed', 'Bee Feed'),
]


class FeedInventory(models.Model):
    """
    Current stock levels per farm.

    One record per farm per feed type. Stock is low when the quantity is at
    or below the minimum threshold.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    farm = models.ForeignKey(
        'farms.Farm',
        on_delete=models.CASCADE,
        related_name='feed_inventory',
        help_text="Farm storing the feed"
    )
    feed_type = models.CharField(max_length=20, choices=FEED_TYPE_CHOICES)

    quantity_kg = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Current stock level in kilograms"
    )
    min_threshold_kg = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Reorder point in kg"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'feed_inventory'
        ordering = ['feed_type']
        verbose_name = 'Feed Inventory'
        verbose_name_plural = 'Feed Inventories'
        unique_together = [['farm', 'feed_type']]

    def __str__(self):
        return f"{self.get_feed_type_display()}: {self.quantity_kg}kg"

    @property
    def is_low_stock(self):
        return self.quantity_kg <= self.min_threshold_kg

    def clean(self):
        errors = {}
        if self.quantity_kg is not None and self.quantity_kg < 0:
            errors['quantity_kg'] = 'Quantity cannot be negative'
        if self.min_threshold_kg is not None and self.min_threshold_kg < 0:
            errors['min_threshold_kg'] = 'Minimum threshold cannot be negative'
        if errors:
            raise ValidationError(errors)


class FeedRecord(models.Model):
    """Feed given to a batch on a given day."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey('livestock.Batch', on_delete=models.CASCADE, related_name='feed_records')
    inventory = models.ForeignKey(
        FeedInventory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='feed_records',
        help_text="Stock the feed was drawn from"
    )

    feed_type = models.CharField(max_length=20, choices=FEED_TYPE_CHOICES)
    quantity_kg = models.DecimalField(max_digits=10, decimal_places=2)
    cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    date = models.DateField()
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'feed_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['batch', 'date']),
            models.Index(fields=['feed_type']),
        ]

    def __str__(self):
        return f"{self.quantity_kg}kg {self.get_feed_type_display()} on {self.date}"

    def clean(self):
        errors = {}
        if self.quantity_kg is not None and self.quantity_kg <= 0:
            errors['quantity_kg'] = 'Quantity must be greater than 0'
        if self.cost is not None and self.cost < 0:
            errors['cost'] = 'Cost cannot be negative'
        if errors:
            raise ValidationError(errors)


class SavedFormulation(models.Model):
    """
    A saved feed ration.

    ``ingredients`` is a list of ``{"name": str, "percentage": number}``.
    Setting ``share_code`` publishes a read-only copy at /api/shared/<code>/.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='formulations'
    )

    name = models.CharField(max_length=200)
    species = models.CharField(max_length=100)
    production_stage = models.CharField(max_length=100)
    batch_size_kg = models.DecimalField(max_digits=10, decimal_places=2)
    ingredients = models.JSONField(default=list)
    total_cost_per_kg = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    nutritional_values = models.JSONField(default=dict, blank=True)
    mixing_instructions = models.TextField(blank=True)

    share_code = models.CharField(max_length=8, unique=True, null=True, blank=True)
    usage_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'saved_formulations'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    @property
    def total_batch_cost(self):
        return (self.total_cost_per_kg * self.batch_size_kg).quantize(Decimal('0.01'))

    def clean(self):
        errors = {}
        if not (self.name or '').strip():
            errors['name'] = 'Formulation name is required'
        if self.batch_size_kg is not None and self.batch_size_kg <= 0:
            errors['batch_size_kg'] = 'Batch size must be greater than 0'
        if self.total_cost_per_kg is not None and self.total_cost_per_kg < 0:
            errors['total_cost_per_kg'] = 'Cost per kg cannot be negative'
        if not isinstance(self.ingredients, list) or not all(
            isinstance(item, dict) and 'name' in item and 'percentage' in item
            for item in self.ingredients
        ):
            errors['ingredients'] = 'Ingredients must be a list of {name, percentage}'
        if errors:
            raise ValidationError(errors)


class SharedLookupRateLimit(models.Model):
    """
    Rate limiting tracker for the public formulation lookup.

    One row per client IP; ``count`` resets when the window expires.
    """

    identifier = models.CharField(max_length=255, unique=True, help_text="Client IP address")
    count = models.IntegerField(default=0, help_text="Lookups in the current window")
    window_start = models.DateTimeField(help_text="Start of the rate limit window")
    last_request = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shared_lookup_rate_limits'
        verbose_name = 'Shared Lookup Rate Limit'
        verbose_name_plural = 'Shared Lookup Rate Limits'

    def __str__(self):
        return f"{self.identifier} ({self.count} lookups)"
