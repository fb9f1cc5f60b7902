"""
Shared view mixins for farm-scoped list and mutation endpoints.

FarmScopedMixin is the data isolation layer: every queryset is narrowed
to the farms the caller can reach, and every write is checked against
the farms the caller can modify.

ListQueryMixin implements the search and sort half of the paginated
list contract; filtering is handled by django-filter and paging by
core.pagination.FarmListPagination.
"""

import uuid

from django.db.models import Q
from django.http import Http404
from rest_framework import exceptions, permissions

from farms.policies import FarmPolicy
from .exceptions import FarmAccessDenied


class FarmScopedMixin:
    """
    Mixin that filters querysets to the farms the user can access.

    Attributes:
        farm_lookup: ORM path from the model to its Farm ('farm', 'batch__farm')
        not_found_message: error returned when a row is missing or out of scope
    """
    permission_classes = [permissions.IsAuthenticated]
    farm_lookup = 'farm'
    not_found_message = 'Record not found'

    def get_accessible_farm_ids(self):
        if not hasattr(self, '_accessible_farm_ids'):
            self._accessible_farm_ids = FarmPolicy.accessible_farm_ids(self.request.user)
        return self._accessible_farm_ids

    def get_requested_farm_id(self):
        """
        The optional ``farm_id`` query parameter, checked for access.

        Raises FarmAccessDenied when the caller cannot read that farm.
        """
        farm_id = self.request.query_params.get('farm_id')
        if not farm_id:
            return None
        try:
            farm_uuid = uuid.UUID(str(farm_id))
        except ValueError:
            FarmPolicy.log_denied(self.request.user, farm_id)
            raise FarmAccessDenied()
        if farm_uuid not in self.get_accessible_farm_ids():
            FarmPolicy.log_denied(self.request.user, farm_id)
            raise FarmAccessDenied()
        return farm_uuid

    def get_scope_farm_ids(self):
        """The requested farm, or every accessible farm when none was requested."""
        farm_id = self.get_requested_farm_id()
        return [farm_id] if farm_id else list(self.get_accessible_farm_ids())

    def scope_queryset(self, queryset):
        """Narrow a queryset to the accessible (or requested) farm."""
        farm_id = self.get_requested_farm_id()
        if farm_id:
            return queryset.filter(**{self.farm_lookup: farm_id})
        return queryset.filter(**{f'{self.farm_lookup}__in': self.get_accessible_farm_ids()})

    def get_queryset(self):
        return self.scope_queryset(super().get_queryset())

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise exceptions.NotFound(self.not_found_message)

    def check_farm_write(self, farm):
        """Raise FarmAccessDenied unless the user may modify records on ``farm``."""
        if not FarmPolicy.can_edit_farm(self.request.user, farm.id):
            FarmPolicy.log_denied(self.request.user, farm.id, action='write')
            raise FarmAccessDenied()

    def get_object_farm(self, instance):
        """Resolve the Farm that owns ``instance`` by following farm_lookup."""
        farm = instance
        for part in self.farm_lookup.split('__'):
            farm = getattr(farm, part)
        return farm

    def get_target_farm(self, validated_data):
        """The farm a create or update writes into, taken from its farm or batch."""
        if validated_data.get('farm') is not None:
            return validated_data['farm']
        if validated_data.get('batch') is not None:
            return validated_data['batch'].farm
        return None

    def perform_create(self, serializer):
        self.check_farm_write(self.get_target_farm(serializer.validated_data))
        serializer.save()

    def perform_update(self, serializer):
        self.check_farm_write(self.get_object_farm(serializer.instance))
        target = self.get_target_farm(serializer.validated_data)
        if target is not None:
            self.check_farm_write(target)
        serializer.save()

    def perform_destroy(self, instance):
        self.check_farm_write(self.get_object_farm(instance))
        instance.delete()


class ListQueryMixin:
    """
    Free-text search and whitelisted sorting for list endpoints.

    Query parameters:
        search: case-insensitive match against ``search_fields``
        sort_by: one of ``sort_fields`` (invalid values use ``default_sort``)
        sort_order: 'asc' or 'desc' (anything else is treated as 'desc')
    """
    search_fields = ()
    sort_fields = {}
    default_sort = 'created_at'

    def search_queryset(self, queryset):
        search = self.request.query_params.get('search', '').strip()
        if not search or not self.search_fields:
            return queryset
        query = Q()
        for field in self.search_fields:
            query |= Q(**{f'{field}__icontains': search})
        return queryset.filter(query)

    def get_sort_field(self):
        sort_by = self.request.query_params.get('sort_by')
        return self.sort_fields.get(sort_by, self.sort_fields.get(self.default_sort, self.default_sort))

    def sort_queryset(self, queryset):
        prefix = '' if self.request.query_params.get('sort_order') == 'asc' else '-'
        return queryset.order_by(f'{prefix}{self.get_sort_field()}', f'{prefix}pk')

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        return self.sort_queryset(self.search_queryset(queryset))
