"""
Feed API Views

Provides endpoints for feed records, feed stock and saved formulations.

API Endpoints:
- /api/feed/ - List/create feed records
- /api/feed/{id}/ - Retrieve/update/delete feed record
- /api/feed/summary/ - Totals by feed type
- /api/feed/inventory/ - List/create feed stock rows
- /api/feed/inventory/{id}/ - Retrieve/update/delete feed stock row
- /api/formulations/ - List/create the user's formulations
- /api/formulations/{id}/ - Retrieve/update/delete formulation
- /api/formulations/{id}/share/ - Generate a public share code
"""

import logging

from rest_framework import exceptions, generics, permissions
from rest_framework.response import Response

from core.mixins import FarmScopedMixin, ListQueryMixin
from livestock.views import DateRangeMixin
from .models import FeedInventory, FeedRecord, SavedFormulation
from .serializers import (
    FeedInventorySerializer,
    FeedRecordSerializer,
    SavedFormulationSerializer,
)
from . import services

logger = logging.getLogger(__name__)


# =============================================================================
# FEED RECORD VIEWS
# =============================================================================

class FeedRecordListCreateView(FarmScopedMixin, ListQueryMixin, DateRangeMixin, generics.ListCreateAPIView):
    """
    GET  /api/feed/
    POST /api/feed/

    Creating a record with an ``inventory`` deducts the quantity from stock.
    """
    queryset = FeedRecord.objects.select_related('batch', 'batch__farm', 'inventory')
    serializer_class = FeedRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Feed record not found'
    filterset_fields = ['feed_type', 'batch']
    search_fields = ('batch__species', 'batch__batch_name', 'notes')
    sort_fields = {
        'date': 'date',
        'cost': 'cost',
        'quantity_kg': 'quantity_kg',
        'feed_type': 'feed_type',
    }
    default_sort = 'date'

    def get_queryset(self):
        return self.filter_date_range(super().get_queryset())

    def perform_create(self, serializer):
        self.check_farm_write(serializer.validated_data['batch'].farm)
        serializer.instance = services.create_feed_record(**serializer.validated_data)


class FeedRecordDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/feed/{id}/

    Updating moves stock by the change in quantity; deleting restores it.
    """
    queryset = FeedRecord.objects.select_related('batch', 'batch__farm', 'inventory')
    serializer_class = FeedRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Feed record not found'

    def perform_update(self, serializer):
        self.check_farm_write(serializer.instance.batch.farm)
        data = dict(serializer.validated_data)
        batch = data.get('batch')
        if batch is not None:
            self.check_farm_write(batch.farm)
        services.update_feed_record(serializer.instance, **data)

    def perform_destroy(self, instance):
        self.check_farm_write(instance.batch.farm)
        services.delete_feed_record(instance)


class FeedSummaryView(FarmScopedMixin, DateRangeMixin, generics.GenericAPIView):
    """
    GET /api/feed/summary/
    """
    queryset = FeedRecord.objects.all()
    farm_lookup = 'batch__farm'

    def get(self, request):
        queryset = self.filter_date_range(self.get_queryset())
        batch_id = request.query_params.get('batch')
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        return Response(services.build_feed_summary(queryset))


# =============================================================================
# FEED INVENTORY VIEWS
# =============================================================================

class FeedInventoryListCreateView(FarmScopedMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET  /api/feed/inventory/
    POST /api/feed/inventory/
    """
    queryset = FeedInventory.objects.select_related('farm')
    serializer_class = FeedInventorySerializer
    not_found_message = 'Feed inventory not found'
    filterset_fields = ['feed_type']
    sort_fields = {
        'feed_type': 'feed_type',
        'quantity_kg': 'quantity_kg',
        'updated_at': 'updated_at',
    }
    default_sort = 'feed_type'


class FeedInventoryDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/feed/inventory/{id}/
    """
    queryset = FeedInventory.objects.select_related('farm')
    serializer_class = FeedInventorySerializer
    not_found_message = 'Feed inventory not found'


# =============================================================================
# FORMULATION VIEWS
# =============================================================================

class FormulationMixin:
    """Formulations belong to a user, not a farm."""
    serializer_class = SavedFormulationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return SavedFormulation.objects.filter(owner=self.request.user)

    def get_object(self):
        formulation = self.get_queryset().filter(pk=self.kwargs['pk']).first()
        if formulation is None:
            raise exceptions.NotFound('Formulation not found')
        return formulation


class FormulationListCreateView(FormulationMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET  /api/formulations/
    POST /api/formulations/
    """
    filterset_fields = ['species', 'production_stage']
    search_fields = ('name', 'species')
    sort_fields = {
        'name': 'name',
        'created_at': 'created_at',
        'usage_count': 'usage_count',
    }
    default_sort = 'created_at'

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)


class FormulationDetailView(FormulationMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/formulations/{id}/
    """


class FormulationShareView(FormulationMixin, generics.GenericAPIView):
    """
    POST /api/formulations/{id}/share/

    Generate (or regenerate) the 8-character public share code.
    """

    def post(self, request, pk):
        formulation = self.get_object()
        return Response({'share_code': services.assign_share_code(formulation)})
