"""
Admin configuration for expenses.
"""

from django.contrib import admin

from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['date', 'farm', 'category', 'amount', 'batch', 'supplier', 'description']
    list_filter = ['category', 'date']
    search_fields = ['description', 'farm__name', 'supplier__name']
    date_hierarchy = 'date'
    raw_id_fields = ['farm', 'batch', 'supplier']
