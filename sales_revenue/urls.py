"""
Sales URLs
"""
from django.urls import path

from .views import SaleDetailView, SaleListCreateView, SalesSummaryView

app_name = 'sales'

urlpatterns = [
    path('summary/', SalesSummaryView.as_view(), name='sales-summary'),
    path('', SaleListCreateView.as_view(), name='sale-list'),
    path('<uuid:pk>/', SaleDetailView.as_view(), name='sale-detail'),
]
