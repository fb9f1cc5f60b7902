"""
Dashboard and Report Views

API Endpoints:
- /api/dashboard/ - Inventory, alerts, recent mortality, upcoming vaccinations, month-to-date money
- /api/dashboard/alerts/ - Alerts with counts per severity
- /api/reports/<report_type>/ - Generate a report as JSON
- /api/reports/export/ - Download a report as CSV, XLSX or PDF
- /api/reports/configs/ - List/create saved report configurations
- /api/reports/configs/{id}/ - Retrieve/update/delete a saved configuration
- /api/reports/configs/{id}/run/ - Generate the report a configuration describes
"""

import logging

from django.utils.dateparse import parse_date
from rest_framework import generics
from rest_framework.response import Response

from accounts.models import UserSettings
from core.mixins import FarmScopedMixin, ListQueryMixin
from farms.models import Farm
from .exports import build_export_response
from .models import ReportConfig
from .reports import ReportError, calculate_date_range, generate_report
from .serializers import ReportConfigSerializer
from .services import AlertService, DashboardService

logger = logging.getLogger(__name__)


# =============================================================================
# DASHBOARD
# =============================================================================

class DashboardView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/dashboard/?farm_id=<uuid>
    """
    queryset = Farm.objects.all()

    def get(self, request):
        return Response(DashboardService(request.user).get_dashboard(self.get_scope_farm_ids()))


class AlertListView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/dashboard/alerts/?farm_id=<uuid>
    """
    queryset = Farm.objects.all()

    def get(self, request):
        return Response(AlertService(request.user).get_alerts_with_counts(self.get_scope_farm_ids()))


# =============================================================================
# REPORTS
# =============================================================================

class ReportMixin(FarmScopedMixin):
    """
    Resolves the report period from ``date_range`` (default ``month``) and,
    for custom ranges, ``start_date`` and ``end_date``.
    """
    queryset = Farm.objects.all()

    def parse_date_param(self, name):
        value = self.request.query_params.get(name)
        if not value:
            return None
        try:
            parsed = parse_date(value)
        except ValueError:
            parsed = None
        if parsed is None:
            raise ReportError(f'Invalid {name}. Use YYYY-MM-DD')
        return parsed

    def get_fiscal_year_start_month(self):
        return UserSettings.for_user(self.request.user).fiscal_year_start_month

    def get_date_range(self):
        return calculate_date_range(
            self.request.query_params.get('date_range', 'month'),
            self.parse_date_param('start_date'),
            self.parse_date_param('end_date'),
            fiscal_year_start_month=self.get_fiscal_year_start_month(),
        )


class ReportView(ReportMixin, generics.GenericAPIView):
    """
    GET /api/reports/<report_type>/?date_range=month&farm_id=<uuid>
    """

    def get(self, request, report_type):
        start_date, end_date = self.get_date_range()
        return Response(generate_report(report_type, self.get_scope_farm_ids(), start_date, end_date))


class ReportExportView(ReportMixin, generics.GenericAPIView):
    """
    GET /api/reports/export/?report_type=sales&format=csv|xlsx|pdf&date_range=month
    """

    def get(self, request):
        export_format = request.query_params.get('format', 'csv')
        start_date, end_date = self.get_date_range()
        report = generate_report(
            request.query_params.get('report_type', ''),
            self.get_scope_farm_ids(),
            start_date,
            end_date,
        )
        response = build_export_response(report, export_format)
        logger.info(f"User {request.user.id} exported {report['report_type']} report as {export_format}")
        return response


# =============================================================================
# SAVED REPORT CONFIGURATIONS
# =============================================================================

class ReportConfigListCreateView(FarmScopedMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET  /api/reports/configs/
    POST /api/reports/configs/
    """
    queryset = ReportConfig.objects.select_related('farm')
    serializer_class = ReportConfigSerializer
    not_found_message = 'Report configuration not found'
    filterset_fields = ['report_type', 'date_range_type']
    search_fields = ('name',)
    sort_fields = {
        'name': 'name',
        'report_type': 'report_type',
        'created_at': 'created_at',
    }
    default_sort = 'name'


class ReportConfigDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/reports/configs/{id}/
    """
    queryset = ReportConfig.objects.select_related('farm')
    serializer_class = ReportConfigSerializer
    not_found_message = 'Report configuration not found'


class ReportConfigRunView(ReportMixin, generics.RetrieveAPIView):
    """
    GET /api/reports/configs/{id}/run/

    Generates the configured report for the configuration's farm.
    """
    queryset = ReportConfig.objects.select_related('farm')
    not_found_message = 'Report configuration not found'

    def get(self, request, pk):
        config = self.get_object()
        start_date, end_date = calculate_date_range(
            config.date_range_type,
            config.custom_start_date,
            config.custom_end_date,
            fiscal_year_start_month=self.get_fiscal_year_start_month(),
        )
        report = generate_report(config.report_type, [config.farm_id], start_date, end_date)
        if not config.include_details:
            report = {key: value for key, value in report.items() if not isinstance(value, list)}
        return Response(report)
