"""
Dashboard URLs
"""
from django.urls import path

from .views import AlertListView, DashboardView

app_name = 'dashboard'

urlpatterns = [
    path('', DashboardView.as_view(), name='dashboard'),
    path('alerts/', AlertListView.as_view(), name='alerts'),
]
