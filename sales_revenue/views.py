"""
Sales API Views

API Endpoints:
- /api/sales/ - List/create sales
- /api/sales/{id}/ - Retrieve/update/delete sale
- /api/sales/summary/ - Count, quantity and revenue by livestock type
- /api/customers/ - List/create customers
- /api/customers/{id}/ - Customer with purchase history and totals
- /api/customers/top/ - Customers ranked by total spent
"""

import logging

from rest_framework import generics
from rest_framework.response import Response

from core.mixins import FarmScopedMixin, ListQueryMixin
from livestock.views import DateRangeMixin
from .models import Customer, Sale
from .serializers import (
    CustomerDetailSerializer,
    CustomerSerializer,
    SaleSerializer,
    TopCustomerSerializer,
)
from . import services

logger = logging.getLogger(__name__)


# =============================================================================
# SALE VIEWS
# =============================================================================

class SaleListCreateView(FarmScopedMixin, ListQueryMixin, DateRangeMixin, generics.ListCreateAPIView):
    """
    GET  /api/sales/
    POST /api/sales/

    A sale from a batch (other than eggs) draws the batch down by its quantity.
    """
    queryset = Sale.objects.select_related('farm', 'batch', 'customer')
    serializer_class = SaleSerializer
    not_found_message = 'Sale not found'
    filterset_fields = ['livestock_type', 'payment_status', 'payment_method', 'batch', 'customer']
    search_fields = ('customer__name', 'batch__species', 'notes')
    sort_fields = {
        'date': 'date',
        'quantity': 'quantity',
        'unit_price': 'unit_price',
        'total_amount': 'total_amount',
        'livestock_type': 'livestock_type',
        'customer_name': 'customer__name',
    }
    default_sort = 'date'

    def get_queryset(self):
        return self.filter_date_range(super().get_queryset())

    def perform_create(self, serializer):
        self.check_farm_write(serializer.validated_data['farm'])
        serializer.instance = services.create_sale(**serializer.validated_data)


class SaleDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/sales/{id}/

    Updating moves batch stock by the change in quantity; deleting restores it.
    """
    queryset = Sale.objects.select_related('farm', 'batch', 'customer')
    serializer_class = SaleSerializer
    not_found_message = 'Sale not found'

    def perform_update(self, serializer):
        self.check_farm_write(serializer.instance.farm)
        data = dict(serializer.validated_data)
        farm = data.get('farm')
        if farm is not None:
            self.check_farm_write(farm)
        services.update_sale(serializer.instance, **data)

    def perform_destroy(self, instance):
        self.check_farm_write(instance.farm)
        services.delete_sale(instance)


class SalesSummaryView(FarmScopedMixin, DateRangeMixin, generics.GenericAPIView):
    """
    GET /api/sales/summary/
    """
    queryset = Sale.objects.all()

    def get(self, request):
        return Response(services.build_sales_summary(self.filter_date_range(self.get_queryset())))


# =============================================================================
# CUSTOMER VIEWS
# =============================================================================

class CustomerListCreateView(FarmScopedMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET  /api/customers/
    POST /api/customers/
    """
    queryset = Customer.objects.select_related('farm')
    serializer_class = CustomerSerializer
    not_found_message = 'Customer not found'
    filterset_fields = ['customer_type']
    search_fields = ('name', 'phone', 'email', 'location')
    sort_fields = {
        'name': 'name',
        'customer_type': 'customer_type',
        'created_at': 'created_at',
    }
    default_sort = 'name'


class CustomerDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/customers/{id}/

    Deleting a customer keeps their sales, unlinked.
    """
    serializer_class = CustomerDetailSerializer
    not_found_message = 'Customer not found'

    def get_queryset(self):
        queryset = services.annotate_customer_totals(Customer.objects.select_related('farm'))
        return self.scope_queryset(queryset).prefetch_related('sales')


class TopCustomersView(FarmScopedMixin, generics.GenericAPIView):
    """
    GET /api/customers/top/?limit=5
    """
    queryset = Customer.objects.all()

    def get_limit(self):
        try:
            limit = int(self.request.query_params.get('limit', services.TOP_CUSTOMERS_DEFAULT))
        except ValueError:
            return services.TOP_CUSTOMERS_DEFAULT
        return limit if limit > 0 else services.TOP_CUSTOMERS_DEFAULT

    def get(self, request):
        customers = services.get_top_customers(self.get_queryset(), self.get_limit())
        return Response(TopCustomerSerializer(customers, many=True).data)
