"""
Farm URLs
"""
from django.urls import path

from .views import (
    FarmDetailView,
    FarmListCreateView,
    FarmMembershipDetailView,
    FarmMembershipListCreateView,
)

app_name = 'farms'

urlpatterns = [
    path('', FarmListCreateView.as_view(), name='farm-list'),
    path('<uuid:pk>/', FarmDetailView.as_view(), name='farm-detail'),

    # Members
    path('<uuid:farm_pk>/members/', FarmMembershipListCreateView.as_view(), name='farm-members'),
    path('<uuid:farm_pk>/members/<uuid:pk>/', FarmMembershipDetailView.as_view(), name='farm-member-detail'),
]
