"""
Admin configuration for saved reports.
"""

from django.contrib import admin

from .models import ReportConfig


@admin.register(ReportConfig)
class ReportConfigAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'report_type', 'date_range_type', 'include_charts', 'include_details']
    list_filter = ['report_type', 'date_range_type']
    search_fields = ['name', 'farm__name']
    raw_id_fields = ['farm']
