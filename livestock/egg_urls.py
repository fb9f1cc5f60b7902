"""
Egg Record URLs
"""
from django.urls import path

from .views import EggDetailView, EggListCreateView, EggSummaryView

app_name = 'eggs'

urlpatterns = [
    path('summary/', EggSummaryView.as_view(), name='egg-summary'),
    path('', EggListCreateView.as_view(), name='egg-list'),
    path('<uuid:pk>/', EggDetailView.as_view(), name='egg-detail'),
]
