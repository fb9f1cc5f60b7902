from django.contrib import admin

from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'supplier_type', 'phone', 'email', 'created_at']
    list_filter = ['supplier_type']
    search_fields = ['name', 'phone', 'email', 'location', 'farm__name']
