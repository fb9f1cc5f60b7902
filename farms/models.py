"""
Farm Models

A farm is the tenant boundary: every batch, sale, customer, supplier and
expense belongs to exactly one farm. Users reach farms through
FarmMembership rows, which also carry their role on that farm.
"""

from django.db import models
from accounts.models import User
import uuid


# =============================================================================
# FARM MODEL
# =============================================================================

class Farm(models.Model):
    """A farm owned by one user and optionally shared with others."""

    FARM_TYPE_CHOICES = [
        ('poultry', 'Poultry'),
        ('aquaculture', 'Aquaculture'),
        ('mixed', 'Mixed'),
        ('cattle', 'Cattle'),
        ('goats', 'Goats'),
        ('sheep', 'Sheep'),
        ('bees', 'Bees'),
        ('multi', 'Multi-species'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='owned_farms',
        help_text="User who created the farm"
    )

    name = models.CharField(max_length=200, help_text="Farm name")
    location = models.CharField(max_length=500, blank=True, help_text="Town, district or address")
    farm_type = models.CharField(max_length=20, choices=FARM_TYPE_CHOICES, default='poultry')
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farms'
        ordering = ['name']
        indexes = [
            models.Index(fields=['owner']),
        ]

    def __str__(self):
        return self.name


# =============================================================================
# FARM MEMBERSHIP
# =============================================================================

class FarmMembership(models.Model):
    """Grants a user access to a farm with a given role."""

    ROLE_OWNER = 'owner'
    ROLE_MANAGER = 'manager'
    ROLE_VIEWER = 'viewer'

    ROLE_CHOICES = [
        (ROLE_OWNER, 'Owner'),
        (ROLE_MANAGER, 'Manager'),
        (ROLE_VIEWER, 'Viewer'),
    ]

    # Roles allowed to create, update and delete farm records
    WRITE_ROLES = (ROLE_OWNER, ROLE_MANAGER)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='farm_memberships')
    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_VIEWER)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'farm_memberships'
        unique_together = [('user', 'farm')]
        ordering = ['farm__name']

    def __str__(self):
        return f"{self.user} - {self.farm} ({self.get_role_display()})"

    @property
    def can_write(self):
        return self.role in self.WRITE_ROLES
