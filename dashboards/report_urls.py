"""
Report URLs
"""
from django.urls import path

from .views import (
    ReportConfigDetailView,
    ReportConfigListCreateView,
    ReportConfigRunView,
    ReportExportView,
    ReportView,
)

app_name = 'reports'

urlpatterns = [
    # Export and saved configurations (must come before the report type route)
    path('export/', ReportExportView.as_view(), name='report-export'),
    path('configs/', ReportConfigListCreateView.as_view(), name='report-config-list'),
    path('configs/<uuid:pk>/', ReportConfigDetailView.as_view(), name='report-config-detail'),
    path('configs/<uuid:pk>/run/', ReportConfigRunView.as_view(), name='report-config-run'),

    path('<str:report_type>/', ReportView.as_view(), name='report'),
]
