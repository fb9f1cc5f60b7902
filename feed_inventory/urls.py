"""
Feed URL Configuration
"""

from django.urls import path

from .views import (
    FeedInventoryDetailView,
    FeedInventoryListCreateView,
    FeedRecordDetailView,
    FeedRecordListCreateView,
    FeedSummaryView,
)

app_name = 'feed'

urlpatterns = [
    # Summary
    path('summary/', FeedSummaryView.as_view(), name='feed-summary'),

    # Feed stock
    path('inventory/', FeedInventoryListCreateView.as_view(), name='feed-inventory-list'),
    path('inventory/<uuid:pk>/', FeedInventoryDetailView.as_view(), name='feed-inventory-detail'),

    # Feed records
    path('', FeedRecordListCreateView.as_view(), name='feed-list'),
    path('<uuid:pk>/', FeedRecordDetailView.as_view(), name='feed-detail'),
]
