"""
Health API Views

API Endpoints:
- /api/health/ - Vaccinations and treatments in one list (?type=all|vaccination|treatment)
- /api/health/vaccinations/ - List/create vaccinations
- /api/health/vaccinations/{id}/ - Retrieve/update/delete vaccination
- /api/health/treatments/ - List/create treatments
- /api/health/treatments/{id}/ - Retrieve/update/delete treatment
- /api/health/summary/ - Vaccination compliance, upcoming doses and active withdrawals
"""

from django.db.models import Q
from rest_framework import exceptions, generics
from rest_framework.response import Response

from core.mixins import FarmScopedMixin, ListQueryMixin
from .models import TreatmentRecord, VaccinationRecord
from .serializers import TreatmentRecordSerializer, VaccinationRecordSerializer
from . import services


HEALTH_RECORD_TYPES = ('all', 'vaccination', 'treatment')
HEALTH_SORT_FIELDS = ('date', 'name', 'type')
UPCOMING_DAYS_DEFAULT = 7


# =============================================================================
# COMBINED LIST
# =============================================================================

class HealthRecordListView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/health/

    Vaccinations and treatments merged into one paginated list.
    Supports ``type``, ``batch``, ``search``, ``sort_by`` (date, name, type)
    and ``sort_order``.
    """
    queryset = VaccinationRecord.objects.all()
    farm_lookup = 'batch__farm'

    def get_record_type(self):
        record_type = self.request.query_params.get('type', 'all')
        if record_type not in HEALTH_RECORD_TYPES:
            raise exceptions.ValidationError({'type': f'Type must be one of: {", ".join(HEALTH_RECORD_TYPES)}'})
        return record_type

    def narrow(self, queryset, name_field):
        batch_id = self.request.query_params.get('batch')
        if batch_id:
            queryset = queryset.filter(batch_id=batch_id)
        search = self.request.query_params.get('search', '').strip()
        if search:
            queryset = queryset.filter(
                Q(**{f'{name_field}__icontains': search}) | Q(batch__species__icontains=search)
            )
        return queryset.select_related('batch')

    def get(self, request):
        record_type = self.get_record_type()
        rows = []
        if record_type in ('all', 'vaccination'):
            vaccinations = self.narrow(self.scope_queryset(VaccinationRecord.objects.all()), 'vaccine_name')
            rows.extend(services.vaccination_row(record) for record in vaccinations)
        if record_type in ('all', 'treatment'):
            treatments = self.narrow(self.scope_queryset(TreatmentRecord.objects.all()), 'medication_name')
            rows.extend(services.treatment_row(record) for record in treatments)

        sort_by = request.query_params.get('sort_by')
        if sort_by not in HEALTH_SORT_FIELDS:
            sort_by = 'date'
        descending = request.query_params.get('sort_order') != 'asc'
        rows.sort(key=lambda row: (row[sort_by].lower() if sort_by == 'name' else row[sort_by], row['id']),
                  reverse=descending)

        page = self.paginate_queryset(rows)
        return self.get_paginated_response(page)


# =============================================================================
# VACCINATION VIEWS
# =============================================================================

class VaccinationListCreateView(FarmScopedMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET  /api/health/vaccinations/
    POST /api/health/vaccinations/
    """
    queryset = VaccinationRecord.objects.select_related('batch')
    serializer_class = VaccinationRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Vaccination not found'
    filterset_fields = ['batch']
    search_fields = ('vaccine_name', 'batch__species', 'batch__farm__name')
    sort_fields = {
        'date': 'date_administered',
        'vaccine_name': 'vaccine_name',
        'dosage': 'dosage',
        'next_due_date': 'next_due_date',
        'species': 'batch__species',
        'farm_name': 'batch__farm__name',
    }
    default_sort = 'date'


class VaccinationDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/health/vaccinations/{id}/
    """
    queryset = VaccinationRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = VaccinationRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Vaccination not found'


# =============================================================================
# TREATMENT VIEWS
# =============================================================================

class TreatmentListCreateView(FarmScopedMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET  /api/health/treatments/
    POST /api/health/treatments/
    """
    queryset = TreatmentRecord.objects.select_related('batch')
    serializer_class = TreatmentRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Treatment not found'
    filterset_fields = ['batch']
    search_fields = ('medication_name', 'reason', 'batch__species')
    sort_fields = {
        'date': 'date',
        'medication_name': 'medication_name',
        'withdrawal_days': 'withdrawal_days',
    }
    default_sort = 'date'


class TreatmentDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/health/treatments/{id}/
    """
    queryset = TreatmentRecord.objects.select_related('batch', 'batch__farm')
    serializer_class = TreatmentRecordSerializer
    farm_lookup = 'batch__farm'
    not_found_message = 'Treatment not found'


# =============================================================================
# SUMMARY
# =============================================================================

class HealthSummaryView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/health/summary/?days=7

    Vaccination counts and compliance, doses due in the next ``days`` days
    and treatments still inside their withdrawal period.
    """
    queryset = VaccinationRecord.objects.select_related('batch')
    farm_lookup = 'batch__farm'

    def get_days_ahead(self):
        try:
            return int(self.request.query_params.get('days', UPCOMING_DAYS_DEFAULT))
        except ValueError:
            return UPCOMING_DAYS_DEFAULT

    def get(self, request):
        vaccinations = list(self.get_queryset())
        treatments = self.scope_queryset(TreatmentRecord.objects.select_related('batch'))

        upcoming = services.get_upcoming_vaccinations(vaccinations, self.get_days_ahead())
        in_withdrawal = [
            treatment for treatment in treatments
            if services.is_in_withdrawal_period(treatment.date, treatment.withdrawal_days)
        ]

        return Response({
            'vaccinations': services.build_vaccination_summary(vaccinations),
            'upcoming': VaccinationRecordSerializer(upcoming, many=True).data,
            'in_withdrawal': TreatmentRecordSerializer(in_withdrawal, many=True).data,
        })
