"""
Farm Access Policy

Defines which farms a user may read and which they may modify.

Access Rules:
- Staff and superusers: every farm
- Members: farms they hold a FarmMembership on
- Owners and managers: may write; viewers are read-only
"""

import logging

from .models import Farm, FarmMembership

logger = logging.getLogger(__name__)


class FarmPolicy:
    """Authorization policy for farm-scoped data."""

    @staticmethod
    def has_global_access(user):
        """Check if user can reach every farm."""
        return user.is_staff or user.is_superuser

    @classmethod
    def accessible_farms(cls, user):
        """Queryset of farms the user can read."""
        if cls.has_global_access(user):
            return Farm.objects.all()
        return Farm.objects.filter(memberships__user=user).distinct()

    @classmethod
    def accessible_farm_ids(cls, user):
        return list(cls.accessible_farms(user).values_list('id', flat=True))

    @classmethod
    def writable_farms(cls, user):
        """Queryset of farms the user can modify."""
        if cls.has_global_access(user):
            return Farm.objects.all()
        return Farm.objects.filter(
            memberships__user=user,
            memberships__role__in=FarmMembership.WRITE_ROLES,
        ).distinct()

    @classmethod
    def can_view_farm(cls, user, farm_id):
        return cls.accessible_farms(user).filter(id=farm_id).exists()

    @classmethod
    def can_edit_farm(cls, user, farm_id):
        return cls.writable_farms(user).filter(id=farm_id).exists()

    @classmethod
    def can_delete_farm(cls, user, farm):
        """Only the owner (or staff) can delete a farm."""
        return cls.has_global_access(user) or farm.owner_id == user.id

    @staticmethod
    def log_denied(user, farm_id, action='access'):
        logger.warning(f"Farm {action} denied: user={user.id} farm={farm_id}")
