"""
Mortality URLs
"""
from django.urls import path

from .views import (
    MortalityCausesView,
    MortalityDetailView,
    MortalityListCreateView,
    MortalitySummaryView,
    MortalityTrendsView,
)

app_name = 'mortality'

urlpatterns = [
    # Analytics
    path('summary/', MortalitySummaryView.as_view(), name='mortality-summary'),
    path('causes/', MortalityCausesView.as_view(), name='mortality-causes'),
    path('trends/', MortalityTrendsView.as_view(), name='mortality-trends'),

    # CRUD operations
    path('', MortalityListCreateView.as_view(), name='mortality-list'),
    path('<uuid:pk>/', MortalityDetailView.as_view(), name='mortality-detail'),
]
