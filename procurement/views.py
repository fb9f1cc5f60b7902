"""
Supplier API Views

API Endpoints:
- /api/suppliers/ - List/create suppliers
- /api/suppliers/{id}/ - Supplier with expenses and total spent
"""

from rest_framework import generics

from core.mixins import FarmScopedMixin, ListQueryMixin
from .models import Supplier
from .serializers import SupplierDetailSerializer, SupplierSerializer
from . import services


class SupplierListCreateView(FarmScopedMixin, ListQueryMixin, generics.ListCreateAPIView):
    """
    GET  /api/suppliers/
    POST /api/suppliers/
    """
    queryset = Supplier.objects.select_related('farm')
    serializer_class = SupplierSerializer
    not_found_message = 'Supplier not found'
    filterset_fields = ['supplier_type']
    search_fields = ('name', 'phone', 'email', 'location')
    sort_fields = {
        'name': 'name',
        'supplier_type': 'supplier_type',
        'created_at': 'created_at',
    }
    default_sort = 'name'


class SupplierDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/suppliers/{id}/

    Suppliers with recorded expenses cannot be deleted.
    """
    queryset = Supplier.objects.select_related('farm').prefetch_related('expenses')
    serializer_class = SupplierDetailSerializer
    not_found_message = 'Supplier not found'

    def perform_destroy(self, instance):
        self.check_farm_write(instance.farm)
        services.delete_supplier(instance)
