"""
Livestock Models

Handles:
- Batches (livestock of one species acquired together, tracked as a cohort)
- Mortality records, which draw down a batch's current quantity
- Weight samples for growth tracking
- Egg collection records for laying flocks
"""

from decimal import Decimal
import uuid

from django.core.exceptions import ValidationError
from django.db import models

from farms.models import Farm


LIVESTOCK_TYPE_CHOICES = [
    ('poultry', 'Poultry'),
    ('fish', 'Fish'),
    ('cattle', 'Cattle'),
    ('goats', 'Goats'),
    ('sheep', 'Sheep'),
    ('bees', 'Bees'),
]


# =============================================================================
# BATCH MODEL
# =============================================================================

class Batch(models.Model):
    """
    A group of livestock of one species acquired together.
    Animals are not tracked individually but as cohorts.
    """

    STATUS_ACTIVE = 'active'
    STATUS_DEPLETED = 'depleted'
    STATUS_SOLD = 'sold'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_DEPLETED, 'Depleted'),
        (STATUS_SOLD, 'Sold'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='batches')

    # Identification
    livestock_type = models.CharField(max_length=20, choices=LIVESTOCK_TYPE_CHOICES, db_index=True)
    species = models.CharField(max_length=100, help_text="e.g. Broiler, Layer, Catfish, Tilapia")
    breed = models.CharField(max_length=100, blank=True)
    batch_name = models.CharField(max_length=100, blank=True)

    # Quantities
    initial_quantity = models.PositiveIntegerField(help_text="Number of animals at acquisition")
    current_quantity = models.PositiveIntegerField(help_text="Number of animals currently in the batch")

    # Acquisition
    acquisition_date = models.DateField()
    cost_per_unit = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        help_text="initial_quantity x cost_per_unit, recomputed on save"
    )
    supplier = models.ForeignKey(
        'procurement.Supplier',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='batches'
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)

    # Targets
    target_harvest_date = models.DateField(null=True, blank=True)
    target_weight_g = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'batches'
        ordering = ['-acquisition_date']
        verbose_name_plural = 'Batches'
        indexes = [
            models.Index(fields=['farm', 'status']),
            models.Index(fields=['farm', 'livestock_type']),
        ]

    def __str__(self):
        return self.batch_name or f"{self.species} ({self.acquisition_date})"

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.current_quantity = self.initial_quantity
        self.total_cost = Decimal(self.initial_quantity or 0) * Decimal(self.cost_per_unit or 0)
        super().save(*args, **kwargs)

    def clean(self):
        errors = {}

        if not (self.species or '').strip():
            errors['species'] = 'Species is required'

        if self.initial_quantity is not None and self.initial_quantity <= 0:
            errors['initial_quantity'] = 'Initial quantity must be greater than 0'

        if self.cost_per_unit is not None and self.cost_per_unit < 0:
            errors['cost_per_unit'] = 'Cost per unit cannot be negative'

        if self.target_harvest_date and self.acquisition_date:
            if self.target_harvest_date <= self.acquisition_date:
                errors['target_harvest_date'] = 'Target harvest date must be after acquisition date'

        if self.target_weight_g is not None and self.target_weight_g <= 0:
            errors['target_weight_g'] = 'Target weight must be greater than 0'

        if (
            not self._state.adding
            and self.current_quantity is not None
            and self.initial_quantity is not None
            and self.current_quantity > self.initial_quantity
        ):
            errors['current_quantity'] = 'Current quantity cannot exceed initial quantity'

        if errors:
            raise ValidationError(errors)

    def has_related_records(self):
        """True when any mortality, feed, weight, egg, health or sale record references this batch."""
        return (
            self.mortality_records.exists()
            or self.feed_records.exists()
            or self.weight_samples.exists()
            or self.egg_records.exists()
            or self.vaccinations.exists()
            or self.treatments.exists()
            or self.sales.exists()
        )


# =============================================================================
# MORTALITY RECORD
# =============================================================================

class MortalityRecord(models.Model):
    """Deaths recorded against a batch."""

    CAUSE_CHOICES = [
        ('disease', 'Disease'),
        ('predator', 'Predator'),
        ('weather', 'Weather'),
        ('unknown', 'Unknown'),
        ('other', 'Other'),
        ('starvation', 'Starvation'),
        ('injury', 'Injury'),
        ('poisoning', 'Poisoning'),
        ('suffocation', 'Suffocation'),
        ('culling', 'Culling'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='mortality_records')

    quantity = models.PositiveIntegerField()
    date = models.DateField()
    cause = models.CharField(max_length=20, choices=CAUSE_CHOICES, default='unknown')
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'mortality_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['batch', 'date']),
            models.Index(fields=['cause']),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.get_cause_display()} on {self.date}"

    def clean(self):
        if self.quantity is not None and self.quantity <= 0:
            raise ValidationError({'quantity': 'Mortality quantity must be greater than 0'})


# =============================================================================
# WEIGHT SAMPLE
# =============================================================================

class WeightSample(models.Model):
    """Average weight measured on a sample of animals from a batch."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='weight_samples')

    date = models.DateField()
    sample_size = models.PositiveIntegerField()
    average_weight_kg = models.DecimalField(max_digits=10, decimal_places=3)
    min_weight_kg = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    max_weight_kg = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'weight_samples'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['batch', 'date']),
        ]

    def __str__(self):
        return f"{self.average_weight_kg}kg avg on {self.date}"

    def clean(self):
        errors = {}

        if self.sample_size is not None and self.sample_size <= 0:
            errors['sample_size'] = 'Sample size must be greater than 0'
        if self.average_weight_kg is not None and self.average_weight_kg <= 0:
            errors['average_weight_kg'] = 'Average weight must be greater than 0'
        if self.min_weight_kg is not None and self.min_weight_kg <= 0:
            errors['min_weight_kg'] = 'Minimum weight must be greater than 0'
        if self.max_weight_kg is not None and self.max_weight_kg <= 0:
            errors['max_weight_kg'] = 'Maximum weight must be greater than 0'

        if (
            'min_weight_kg' not in errors
            and 'max_weight_kg' not in errors
            and self.min_weight_kg is not None
            and self.max_weight_kg is not None
            and self.min_weight_kg > self.max_weight_kg
        ):
            errors['min_weight_kg'] = 'Minimum weight cannot be greater than maximum weight'

        if errors:
            raise ValidationError(errors)


# =============================================================================
# EGG RECORD
# =============================================================================

class EggRecord(models.Model):
    """Daily egg collection for a laying batch."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='egg_records')

    date = models.DateField()
    quantity_collected = models.IntegerField(default=0)
    quantity_broken = models.IntegerField(default=0)
    quantity_sold = models.IntegerField(default=0)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'egg_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['batch', 'date']),
        ]

    def __str__(self):
        return f"{self.quantity_collected} eggs on {self.date}"

    def clean(self):
        errors = {}

        if self.quantity_collected is not None and self.quantity_collected < 0:
            errors['quantity_collected'] = 'Quantity collected cannot be negative'
        if self.quantity_broken is not None and self.quantity_broken < 0:
            errors['quantity_broken'] = 'Quantity broken cannot be negative'
        if self.quantity_sold is not None and self.quantity_sold < 0:
            errors['quantity_sold'] = 'Quantity sold cannot be negative'

        if not errors and (self.quantity_broken or 0) + (self.quantity_sold or 0) > (self.quantity_collected or 0):
            errors['quantity_collected'] = 'Broken and sold quantities cannot exceed collected quantity'

        if errors:
            raise ValidationError(errors)


# =============================================================================
# WATER QUALITY
# =============================================================================

class WaterQualityRecord(models.Model):
    """Pond water reading for a fish batch."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='water_quality_records')

    date = models.DateField()
    ph = models.DecimalField(max_digits=4, decimal_places=2)
    temperature_celsius = models.DecimalField(max_digits=5, decimal_places=2)
    dissolved_oxygen_mg_l = models.DecimalField(max_digits=6, decimal_places=2)
    ammonia_mg_l = models.DecimalField(max_digits=6, decimal_places=3)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'water_quality_records'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['batch', 'date']),
        ]

    def __str__(self):
        return f"pH {self.ph} on {self.date}"

    def clean(self):
        # Readings outside the safe range are still recorded; alerts flag them
        errors = {}

        if self.ph is not None and not Decimal('0') <= self.ph <= Decimal('14'):
            errors['ph'] = 'pH must be between 0 and 14'
        if self.temperature_celsius is not None and not Decimal('-10') <= self.temperature_celsius <= Decimal('50'):
            errors['temperature_celsius'] = 'Temperature must be between -10°C and 50°C'
        if self.dissolved_oxygen_mg_l is not None and self.dissolved_oxygen_mg_l < 0:
            errors['dissolved_oxygen_mg_l'] = 'Dissolved oxygen cannot be negative'
        if self.ammonia_mg_l is not None and self.ammonia_mg_l < 0:
            errors['ammonia_mg_l'] = 'Ammonia cannot be negative'

        if errors:
            raise ValidationError(errors)
