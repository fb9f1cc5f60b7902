"""
Customer URLs
"""
from django.urls import path

from .views import CustomerDetailView, CustomerListCreateView, TopCustomersView

app_name = 'customers'

urlpatterns = [
    path('top/', TopCustomersView.as_view(), name='customer-top'),
    path('', CustomerListCreateView.as_view(), name='customer-list'),
    path('<uuid:pk>/', CustomerDetailView.as_view(), name='customer-detail'),
]
