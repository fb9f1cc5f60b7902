"""
Views for farms and farm memberships.

API Endpoints:
- /api/farms/ - List farms the user belongs to, create a farm
- /api/farms/{id}/ - Retrieve/update/delete a farm
- /api/farms/{id}/members/ - List/add members
- /api/farms/{id}/members/{membership_id}/ - Change role/remove member
"""

import logging

from django.shortcuts import get_object_or_404
from rest_framework import exceptions, generics, permissions

from core.exceptions import FarmAccessDenied
from core.mixins import ListQueryMixin
from .models import Farm, FarmMembership
from .policies import FarmPolicy
from .serializers import FarmMembershipSerializer, FarmSerializer
from . import services

logger = logging.getLogger(__name__)


# =============================================================================
# FARM VIEWS
# =============================================================================

class FarmListCreateView(ListQueryMixin, generics.ListCreateAPIView):
    """
    GET /api/farms/
    POST /api/farms/

    List the farms the user can access or create a new one.
    The creator becomes the farm's owner.
    """
    serializer_class = FarmSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ['farm_type']
    search_fields = ('name', 'location')
    sort_fields = {
        'name': 'name',
        'farm_type': 'farm_type',
        'created_at': 'created_at',
    }
    default_sort = 'name'

    def get_queryset(self):
        return FarmPolicy.accessible_farms(self.request.user).prefetch_related('memberships')

    def perform_create(self, serializer):
        serializer.instance = services.create_farm(self.request.user, **serializer.validated_data)


class FarmDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/farms/{id}/

    Owners and managers may update a farm; only the owner may delete it.
    """
    serializer_class = FarmSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return FarmPolicy.accessible_farms(self.request.user).prefetch_related('memberships')

    def get_object(self):
        queryset = self.get_queryset()
        farm = queryset.filter(pk=self.kwargs['pk']).first()
        if farm is None:
            raise exceptions.NotFound('Farm not found')
        return farm

    def perform_update(self, serializer):
        if not FarmPolicy.can_edit_farm(self.request.user, serializer.instance.id):
            FarmPolicy.log_denied(self.request.user, serializer.instance.id, action='write')
            raise FarmAccessDenied()
        serializer.save()

    def perform_destroy(self, instance):
        if not FarmPolicy.can_delete_farm(self.request.user, instance):
            FarmPolicy.log_denied(self.request.user, instance.id, action='delete')
            raise FarmAccessDenied()
        services.delete_farm(instance)


# =============================================================================
# MEMBERSHIP VIEWS
# =============================================================================

class FarmMembershipMixin:
    """Resolves the farm from the URL; writes require the owner role."""
    serializer_class = FarmMembershipSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    def get_farm(self):
        if not hasattr(self, '_farm'):
            self._farm = FarmPolicy.accessible_farms(self.request.user).filter(
                pk=self.kwargs['farm_pk']
            ).first()
            if self._farm is None:
                raise exceptions.NotFound('Farm not found')
        return self._farm

    def check_owner(self):
        farm = self.get_farm()
        if not FarmPolicy.can_delete_farm(self.request.user, farm):
            FarmPolicy.log_denied(self.request.user, farm.id, action='membership change')
            raise FarmAccessDenied()

    def get_queryset(self):
        return FarmMembership.objects.filter(farm=self.get_farm()).select_related('user', 'farm')


class FarmMembershipListCreateView(FarmMembershipMixin, generics.ListCreateAPIView):
    """
    GET /api/farms/{id}/members/
    POST /api/farms/{id}/members/

    Add an existing user (by email) to a farm with a role.
    """

    def perform_create(self, serializer):
        self.check_owner()
        data = serializer.validated_data
        serializer.instance = services.add_member(self.get_farm(), data['user'], data.get('role', FarmMembership.ROLE_VIEWER))
        logger.info(f"Added user {data['user'].id} to farm {self.get_farm().id}")


class FarmMembershipDetailView(FarmMembershipMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PATCH/DELETE /api/farms/{id}/members/{membership_id}/
    """

    def get_object(self):
        return get_object_or_404(self.get_queryset(), pk=self.kwargs['pk'])

    def perform_update(self, serializer):
        self.check_owner()
        role = serializer.validated_data.get('role', serializer.instance.role)
        services.change_member_role(serializer.instance, role)

    def perform_destroy(self, instance):
        self.check_owner()
        services.remove_member(instance)
        logger.info(f"Removed membership {instance.id} from farm {instance.farm_id}")
