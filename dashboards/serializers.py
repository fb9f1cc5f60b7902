"""
Serializers for saved report configurations.
"""

from rest_framework import serializers

from core.serializers import CleanModelSerializer
from .models import ReportConfig


class ReportConfigSerializer(CleanModelSerializer):
    name = serializers.CharField(max_length=100, allow_blank=True)
    farm_name = serializers.CharField(source='farm.name', read_only=True)
    report_type_display = serializers.CharField(source='get_report_type_display', read_only=True)
    date_range_type_display = serializers.CharField(source='get_date_range_type_display', read_only=True)

    class Meta:
        model = ReportConfig
        fields = [
            'id', 'farm', 'farm_name', 'name', 'report_type', 'report_type_display',
            'date_range_type', 'date_range_type_display', 'custom_start_date',
            'custom_end_date', 'include_charts', 'include_details',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
