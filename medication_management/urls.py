"""
Health URLs
"""
from django.urls import path

from .views import (
    HealthRecordListView,
    HealthSummaryView,
    TreatmentDetailView,
    TreatmentListCreateView,
    VaccinationDetailView,
    VaccinationListCreateView,
)

app_name = 'health'

urlpatterns = [
    path('', HealthRecordListView.as_view(), name='health-records'),
    path('summary/', HealthSummaryView.as_view(), name='health-summary'),

    # Vaccinations
    path('vaccinations/', VaccinationListCreateView.as_view(), name='vaccination-list'),
    path('vaccinations/<uuid:pk>/', VaccinationDetailView.as_view(), name='vaccination-detail'),

    # Treatments
    path('treatments/', TreatmentListCreateView.as_view(), name='treatment-list'),
    path('treatments/<uuid:pk>/', TreatmentDetailView.as_view(), name='treatment-detail'),
]
