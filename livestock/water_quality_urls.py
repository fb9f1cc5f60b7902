"""
Water Quality URLs
"""
from django.urls import path

from .views import WaterQualityDetailView, WaterQualityListCreateView

app_name = 'water_quality'

urlpatterns = [
    path('', WaterQualityListCreateView.as_view(), name='water-quality-list'),
    path('<uuid:pk>/', WaterQualityDetailView.as_view(), name='water-quality-detail'),
]
