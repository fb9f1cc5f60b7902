"""
Farm Services

Farm creation and membership rules.
"""

import logging

from django.db import transaction

from core.exceptions import BusinessRuleError
from .models import Farm, FarmMembership

logger = logging.getLogger(__name__)


class FarmHasRecordsError(BusinessRuleError):
    """Raised when deleting a farm that still has batches, sales or expenses."""
    pass


class MembershipError(BusinessRuleError):
    """Raised on an invalid membership change."""
    pass


@transaction.atomic
def create_farm(owner, **fields):
    """Create a farm and give its creator the owner role."""
    farm = Farm.objects.create(owner=owner, **fields)
    FarmMembership.objects.create(user=owner, farm=farm, role=FarmMembership.ROLE_OWNER)
    logger.info(f"Created farm {farm.id} for user {owner.id}")
    return farm


def delete_farm(farm):
    """Delete a farm that has no batches, sales or expenses."""
    if farm.batches.exists() or farm.sales.exists() or farm.expenses.exists():
        raise FarmHasRecordsError(
            'Cannot delete farm with existing records. Delete related records first.'
        )
    farm_id = farm.id
    farm.delete()
    logger.info(f"Deleted farm {farm_id}")


def add_member(farm, user, role):
    if FarmMembership.objects.filter(farm=farm, user=user).exists():
        raise MembershipError('User is already a member of this farm')
    return FarmMembership.objects.create(farm=farm, user=user, role=role)


def change_member_role(membership, role):
    if membership.user_id == membership.farm.owner_id and role != FarmMembership.ROLE_OWNER:
        raise MembershipError('Cannot change the role of the farm owner')
    membership.role = role
    membership.save(update_fields=['role'])
    return membership


def remove_member(membership):
    if membership.user_id == membership.farm.owner_id:
        raise MembershipError('Cannot remove the farm owner')
    membership.delete()
