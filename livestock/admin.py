"""
Admin interface for batches and batch records.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import Batch, EggRecord, MortalityRecord, WaterQualityRecord, WeightSample
from .services import calculate_mortality_rate


# =============================================================================
# BATCH ADMIN
# =============================================================================

@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    """
    Admin interface for batch management.
    """

    list_display = [
        'species', 'batch_name', 'farm', 'livestock_type', 'status',
        'current_quantity', 'initial_quantity', 'mortality_rate_badge', 'acquisition_date'
    ]

    list_filter = ['status', 'livestock_type', 'acquisition_date']

    search_fields = ['species', 'breed', 'batch_name', 'farm__name', 'farm__owner__email']

    readonly_fields = ['id', 'total_cost', 'created_at', 'updated_at']

    fieldsets = [
        ('Identification', {
            'fields': ['id', 'farm', 'livestock_type', 'species', 'breed', 'batch_name']
        }),
        ('Acquisition', {
            'fields': [
                'acquisition_date', 'initial_quantity', 'current_quantity',
                'cost_per_unit', 'total_cost', 'supplier'
            ]
        }),
        ('Targets', {
            'fields': ['status', 'target_harvest_date', 'target_weight_g', 'notes']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    @admin.display(description='Mortality')
    def mortality_rate_badge(self, obj):
        rate = calculate_mortality_rate(obj.initial_quantity, obj.initial_quantity - obj.current_quantity)
        color = 'green' if rate <= 5 else 'orange' if rate <= 10 else 'red'
        return format_html('<span style="color: {};">{}%</span>', color, f'{rate:.1f}')


@admin.register(MortalityRecord)
class MortalityRecordAdmin(admin.ModelAdmin):
    list_display = ['batch', 'date', 'quantity', 'cause']
    list_filter = ['cause', 'date']
    search_fields = ['batch__species', 'batch__batch_name', 'notes']
    date_hierarchy = 'date'


@admin.register(WeightSample)
class WeightSampleAdmin(admin.ModelAdmin):
    list_display = ['batch', 'date', 'sample_size', 'average_weight_kg']
    list_filter = ['date']
    search_fields = ['batch__species', 'batch__batch_name']


@admin.register(EggRecord)
class EggRecordAdmin(admin.ModelAdmin):
    list_display = ['batch', 'date', 'quantity_collected', 'quantity_broken', 'quantity_sold']
    list_filter = ['date']
    search_fields = ['batch__species', 'batch__batch_name']
    date_hierarchy = 'date'


@admin.register(WaterQualityRecord)
class WaterQualityRecordAdmin(admin.ModelAdmin):
    list_display = ['batch', 'date', 'ph', 'temperature_celsius', 'dissolved_oxygen_mg_l', 'ammonia_mg_l']
    list_filter = ['date']
    search_fields = ['batch__species', 'batch__batch_name']
    date_hierarchy = 'date'
