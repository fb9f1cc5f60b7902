"""
Saved Formulation URLs
"""

from django.urls import path

from .views import FormulationDetailView, FormulationListCreateView, FormulationShareView

app_name = 'formulations'

urlpatterns = [
    path('', FormulationListCreateView.as_view(), name='formulation-list'),
    path('<uuid:pk>/', FormulationDetailView.as_view(), name='formulation-detail'),
    path('<uuid:pk>/share/', FormulationShareView.as_view(), name='formulation-share'),
]
