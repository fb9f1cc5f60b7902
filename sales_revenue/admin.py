from django.contrib import admin
from django.utils.html import format_html

from .models import Customer, Sale


class SaleInline(admin.TabularInline):
    model = Sale
    extra = 0
    fields = ['date', 'livestock_type', 'quantity', 'unit_price', 'total_amount', 'payment_status']
    readonly_fields = ['total_amount']
    show_change_link = True


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'customer_type', 'phone', 'email', 'created_at']
    list_filter = ['customer_type', 'created_at']
    search_fields = ['name', 'phone', 'email', 'location', 'farm__name']
    inlines = [SaleInline]


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = [
        'date', 'farm', 'livestock_type', 'quantity', 'unit_type',
        'unit_price', 'total_amount', 'get_payment_status_badge'
    ]
    list_filter = ['livestock_type', 'payment_status', 'payment_method', 'date']
    search_fields = ['customer__name', 'farm__name', 'batch__species', 'notes']
    readonly_fields = ['total_amount', 'created_at', 'updated_at']
    date_hierarchy = 'date'

    def get_payment_status_badge(self, obj):
        colors = {
            'paid': 'green',
            'pending': 'orange',
            'partial': 'blue',
        }
        return format_html(
            '<span style="color: {};">{}</span>',
            colors.get(obj.payment_status, 'gray'),
            obj.get_payment_status_display()
        )
    get_payment_status_badge.short_description = 'Payment'
