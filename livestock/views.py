"""
Views for batches, mortality, weight samples and egg records.

All views are farm-scoped: rows outside the caller's farms are invisible,
and writes require an owner or manager role on the row's farm.

API Endpoints:
- /api/batches/ - List/create batches
- /api/batches/{id}/ - Retrieve/update/delete batch
- /api/batches/{id}/stats/ - Mortality, feed, sales and growth figures
- /api/batches/summary/ - Inventory summary across farms
- /api/batches/attention/ - Batches with an abnormal performance index
- /api/mortality/ - List/create mortality records
- /api/weight/ - List/create weight samples
- /api/eggs/ - List/create egg records
- /api/water-quality/ - List/create pond water readings
"""

import logging

from rest_framework import exceptions, generics, status
from rest_framework.response import Response

from core.mixins import FarmScopedMixin, ListQueryMixin
from dashboards.services.alerts import AlertService
from dashboards.services.summary import get_inventory_summary
from .models import Batch, EggRecord, MortalityRecord, WaterQualityRecord, WeightSample
from .serializers import (
    BatchCreateSerializer,
    BatchDetailSerializer,
    BatchListSerializer,
    EggRecordSerializer,
    MortalityRecordSerializer,
    WaterQualityRecordSerializer,
    WeightSampleSerializer,
)
from . import services

logger = logging.getLogger(__name__)


TREND_PERIODS = ('daily', 'weekly', 'monthly')


class DateRangeMixin:
    """Optional ``start_date``/``end_date`` filtering on a date field."""
    date_field = 'date'

    def filter_date_range(self, queryset):
        start_date = self.request.query_params.get('start_date')
        end_date = self.request.query_params.get('end_date')
        if start_date:
            queryset = queryset.filter(**{f'{self.date_field}__gte': start_date})
        if end_date:
            queryset = queryset.filter(**{f'{self.date_field}__lte': end_date})
        return queryset


# =============================================================================
# BATCH VIEWS
# =============================================================================

class BatchListCreateView(FarmScopedMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET /api/batches/
    POST /api/batches/

    List batches or create a new one. Current quantity starts equal to the
    initial quantity.
    """
    queryset = Batch.objects.select_related('farm')
    not_found_message = 'Batch not found'
    filterset_fields = ['status', 'livestock_type', 'breed']
    search_fields = ('species', 'farm__name')
    sort_fields = {
        'species': 'species',
        'current_quantity': 'current_quantity',
        'status': 'status',
        'livestock_type': 'livestock_type',
        'acquisition_date': 'acquisition_date',
    }
    default_sort = 'acquisition_date'

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return BatchCreateSerializer
        return BatchListSerializer

    def perform_create(self, serializer):
        super().perform_create(serializer)
        logger.info(
            f"Created batch {serializer.instance.id} on farm {serializer.instance.farm_id} "
            f"with {serializer.instance.initial_quantity} head"
        )

    def create(self, request, *args, **kwargs):
        """Override to return detail serializer after creation"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)

        detail_serializer = BatchDetailSerializer(serializer.instance)
        return Response(detail_serializer.data, status=status.HTTP_201_CREATED)


class BatchDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/batches/{id}/

    A batch with any dependent records cannot be deleted.
    """
    queryset = Batch.objects.select_related('farm', 'supplier')
    serializer_class = BatchDetailSerializer
    not_found_message = 'Batch not found'

    def perform_destroy(self, instance):
        self.check_farm_write(instance.farm)
        services.delete_batch(instance)


class BatchStatsView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/batches/{id}/stats/
    """
    queryset = Batch.objects.select_related('farm')
    not_found_message = 'Batch not found'

    def get(self, request, pk):
        batch = self.get_object()
        data = services.get_batch_stats(batch)
        data['batch'] = BatchDetailSerializer(batch).data
        return Response(data)


class BatchSummaryView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/batches/summary/

    Inventory summary across the accessible farms (or ``farm_id``).
    """
    queryset = Batch.objects.all()

    def get(self, request):
        return Response(get_inventory_summary(self.get_queryset(), self.get_scope_farm_ids()))


class BatchAttentionView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/batches/attention/

    Up to five active batches whose performance index is outside 90-110.
    """
    queryset = Batch.objects.filter(status=Batch.STATUS_ACTIVE)

    def get(self, request):
        return Response(services.get_batches_needing_attention(self.get_queryset()))


# =============================================================================
# MORTALITY VIEWS
# =============================================================================

class MortalityListCreateView(FarmScopedMixin, ListQueryMixin, DateRangeMixin, generics.ListCreateAPIView):
    """
    GET /api/mortality/
    POST /api/mortality/

    Recording mortality draws the batch down by the recorded quantity.
    """
    queryset = MortalityRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = MortalityRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Mortality record not found'
    filterset_fields = ['cause', 'batch']
    search_fields = ('batch__species', 'batch__batch_name', 'notes')
    sort_fields = {
        'date': 'date',
        'quantity': 'quantity',
        'cause': 'cause',
    }
    default_sort = 'date'

    def get_queryset(self):
        return self.filter_date_range(super().get_queryset())

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        batch = data.pop('batch')
        self.check_farm_write(batch.farm)
        serializer.instance = services.record_mortality(batch.id, **data)


class MortalityDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/mortality/{id}/

    Updating adjusts the batch by the change in quantity; deleting restores it.
    """
    queryset = MortalityRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = MortalityRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Mortality record not found'

    def perform_update(self, serializer):
        self.check_farm_write(serializer.instance.batch.farm)
        data = dict(serializer.validated_data)
        data.pop('batch', None)
        services.update_mortality(serializer.instance, **data)

    def perform_destroy(self, instance):
        self.check_farm_write(instance.batch.farm)
        services.delete_mortality(instance)


class MortalityAnalyticsMixin(FarmScopedMixin, DateRangeMixin):
    queryset = MortalityRecord.objects.select_related('batch')
    farm_lookup = 'batch__farm'

    def get_records(self):
        queryset = self.filter_date_range(self.get_queryset())
        batch_id = self.request.query_params.get('batch')
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        return queryset


class MortalitySummaryView(MortalityAnalyticsMixin, generics.GenericAPIView):
    """
    GET /api/mortality/summary/

    Total deaths and record count, with alert counts for the same farms.
    """

    def get(self, request):
        alerts = AlertService(request.user).get_alerts(self.get_scope_farm_ids())
        critical = sum(1 for alert in alerts if alert['type'] == 'critical')
        return Response(services.build_mortality_summary(self.get_records(), critical, len(alerts)))


class MortalityCausesView(MortalityAnalyticsMixin, generics.GenericAPIView):
    """
    GET /api/mortality/causes/
    """

    def get(self, request):
        records = self.get_records().values('cause', 'quantity')
        return Response(services.calculate_cause_distribution(records))


class MortalityTrendsView(MortalityAnalyticsMixin, generics.GenericAPIView):
    """
    GET /api/mortality/trends/?period=daily|weekly|monthly
    """

    def get(self, request):
        period = request.query_params.get('period', 'daily')
        if period not in TREND_PERIODS:
            raise exceptions.ValidationError({'period': f'Period must be one of: {", ".join(TREND_PERIODS)}'})
        return Response(services.build_mortality_trends(self.get_records(), period))


# =============================================================================
# WEIGHT VIEWS
# =============================================================================

class WeightListCreateView(FarmScopedMixin, ListQueryMixin, DateRangeMixin, generics.ListCreateAPIView):
    """
    GET /api/weight/
    POST /api/weight/
    """
    queryset = WeightSample.objects.select_related('batch', 'batch__farm')
    serializer_class = WeightSampleSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Weight sample not found'
    filterset_fields = ['batch']
    search_fields = ('batch__species', 'notes')
    sort_fields = {
        'date': 'date',
        'average_weight_kg': 'average_weight_kg',
        'sample_size': 'sample_size',
    }
    default_sort = 'date'

    def get_queryset(self):
        return self.filter_date_range(super().get_queryset())


class WeightDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/weight/{id}/
    """
    queryset = WeightSample.objects.select_related('batch', 'batch__farm')
    serializer_class = WeightSampleSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Weight sample not found'


class WeightStatsView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/weight/batch/{batch_id}/stats/

    Growth statistics for one batch.
    """
    queryset = Batch.objects.all()
    not_found_message = 'Batch not found'
    lookup_url_kwarg = 'batch_id'

    def get(self, request, batch_id):
        batch = self.get_object()
        samples = list(batch.weight_samples.order_by('date', 'created_at'))
        return Response(services.build_weight_stats(samples, batch.species))


# =============================================================================
# EGG VIEWS
# =============================================================================

class EggListCreateView(FarmScopedMixin, ListQueryMixin, DateRangeMixin, generics.ListCreateAPIView):
    """
    GET /api/eggs/
    POST /api/eggs/
    """
    queryset = EggRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = EggRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Egg record not found'
    filterset_fields = ['batch']
    search_fields = ('batch__species', 'batch__batch_name', 'notes')
    sort_fields = {
        'date': 'date',
        'quantity_collected': 'quantity_collected',
        'quantity_sold': 'quantity_sold',
    }
    default_sort = 'date'

    def get_queryset(self):
        return self.filter_date_range(super().get_queryset())


class EggDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/eggs/{id}/
    """
    queryset = EggRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = EggRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Egg record not found'


class EggSummaryView(FarmScopedMixin, DateRangeMixin, generics.GenericAPIView):
    """
    GET /api/eggs/summary/

    Collected, broken and sold totals with the remaining inventory.
    """
    queryset = EggRecord.objects.all()
    farm_lookup = 'batch__farm'

    def get(self, request):
        queryset = self.filter_date_range(self.get_queryset())
        batch_id = request.query_params.get('batch')
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        return Response(services.build_egg_summary(queryset))


# =============================================================================
# WATER QUALITY VIEWS
# =============================================================================

class WaterQualityListCreateView(FarmScopedMixin, ListQueryMixin, DateRangeMixin, generics.ListCreateAPIView):
    """
    GET /api/water-quality/
    POST /api/water-quality/
    """
    queryset = WaterQualityRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = WaterQualityRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Water quality record not found'
    filterset_fields = ['batch']
    search_fields = ('batch__species', 'batch__batch_name', 'notes')
    sort_fields = {
        'date': 'date',
        'ph': 'ph',
        'ammonia_mg_l': 'ammonia_mg_l',
    }
    default_sort = 'date'

    def get_queryset(self):
        return self.filter_date_range(super().get_queryset())


class WaterQualityDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/water-quality/{id}/
    """
    queryset = WaterQualityRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = WaterQualityRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Water quality record not found'
