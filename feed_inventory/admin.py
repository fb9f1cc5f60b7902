"""
Feed Inventory Admin Configuration

Admin interface for feed records, inventory levels and saved formulations.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import FeedInventory, FeedRecord, SavedFormulation, SharedLookupRateLimit


@admin.register(FeedInventory)
class FeedInventoryAdmin(admin.ModelAdmin):
    """Admin interface for feed stock levels."""

    list_display = ['farm', 'feed_type', 'quantity_kg', 'min_threshold_kg', 'stock_status']
    list_filter = ['feed_type']
    search_fields = ['farm__name']

    @admin.display(description='Stock')
    def stock_status(self, obj):
        if obj.is_low_stock:
            return format_html('<span style="color: red;">{}</span>', 'Low')
        return format_html('<span style="color: green;">{}</span>', 'OK')


@admin.register(FeedRecord)
class FeedRecordAdmin(admin.ModelAdmin):
    list_display = ['batch', 'feed_type', 'quantity_kg', 'cost', 'date']
    list_filter = ['feed_type', 'date']
    search_fields = ['batch__species', 'batch__batch_name']
    date_hierarchy = 'date'


@admin.register(SavedFormulation)
class SavedFormulationAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'species', 'production_stage', 'share_code', 'usage_count']
    search_fields = ['name', 'species', 'owner__email', 'share_code']
    readonly_fields = ['share_code', 'usage_count']


@admin.register(SharedLookupRateLimit)
class SharedLookupRateLimitAdmin(admin.ModelAdmin):
    list_display = ['identifier', 'count', 'window_start', 'last_request']
    search_fields = ['identifier']
