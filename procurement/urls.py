"""
Supplier URLs
"""
from django.urls import path

from .views import SupplierDetailView, SupplierListCreateView

app_name = 'suppliers'

urlpatterns = [
    path('', SupplierListCreateView.as_view(), name='supplier-list'),
    path('<uuid:pk>/', SupplierDetailView.as_view(), name='supplier-detail'),
]
