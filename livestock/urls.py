"""
Batch URLs

Provides endpoints for managing livestock batches.
"""
from django.urls import path

from .views import (
    BatchAttentionView,
    BatchDetailView,
    BatchListCreateView,
    BatchStatsView,
    BatchSummaryView,
)

app_name = 'livestock'

urlpatterns = [
    # Aggregates (must come before detail routes)
    path('summary/', BatchSummaryView.as_view(), name='batch-summary'),
    path('attention/', BatchAttentionView.as_view(), name='batch-attention'),

    # CRUD operations
    path('', BatchListCreateView.as_view(), name='batch-list'),
    path('<uuid:pk>/', BatchDetailView.as_view(), name='batch-detail'),
    path('<uuid:pk>/stats/', BatchStatsView.as_view(), name='batch-stats'),
]
