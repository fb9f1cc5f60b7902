"""
URL configuration for the expenses app.

All endpoints are prefixed with /api/expenses/
"""

from django.urls import path

from .views import (
    ExpenseCategoryListView,
    ExpenseDetailView,
    ExpenseListCreateView,
    ExpenseSummaryView,
)

app_name = 'expenses'

urlpatterns = [
    path('categories/', ExpenseCategoryListView.as_view(), name='category-list'),
    path('summary/', ExpenseSummaryView.as_view(), name='expense-summary'),
    path('', ExpenseListCreateView.as_view(), name='expense-list'),
    path('<uuid:pk>/', ExpenseDetailView.as_view(), name='expense-detail'),
]
