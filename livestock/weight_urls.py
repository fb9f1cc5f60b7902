"""
Weight Sample URLs
"""
from django.urls import path

from .views import WeightDetailView, WeightListCreateView, WeightStatsView

app_name = 'weight'

urlpatterns = [
    path('', WeightListCreateView.as_view(), name='weight-list'),
    path('<uuid:pk>/', WeightDetailView.as_view(), name='weight-detail'),
    path('batch/<uuid:batch_id>/stats/', WeightStatsView.as_view(), name='weight-stats'),
]
