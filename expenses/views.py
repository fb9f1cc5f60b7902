"""
Expense API Views

API Endpoints:
- /api/expenses/ - List/create expenses
- /api/expenses/{id}/ - Retrieve/update/delete expense
- /api/expenses/categories/ - Expense categories
- /api/expenses/summary/ - Totals by category
"""

from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from core.mixins import FarmScopedMixin, ListQueryMixin
from livestock.views import DateRangeMixin
from .models import Expense, ExpenseCategory
from .serializers import ExpenseSerializer
from .services import build_expense_summary


class ExpenseCategoryListView(APIView):
    """
    GET /api/expenses/categories/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response([
            {'value': value, 'label': label}
            for value, label in ExpenseCategory.choices
        ])


class ExpenseListCreateView(FarmScopedMixin, ListQueryMixin, DateRangeMixin, generics.ListCreateAPIView):
    """
    GET  /api/expenses/
    POST /api/expenses/
    """
    queryset = Expense.objects.select_related('farm', 'batch', 'supplier')
    serializer_class = ExpenseSerializer
    not_found_message = 'Expense not found'
    filterset_fields = ['category', 'batch', 'supplier']
    search_fields = ('description', 'supplier__name', 'batch__species')
    sort_fields = {
        'date': 'date',
        'amount': 'amount',
        'category': 'category',
        'created_at': 'created_at',
    }
    default_sort = 'date'

    def get_queryset(self):
        return self.filter_date_range(super().get_queryset())


class ExpenseDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/expenses/{id}/
    """
    queryset = Expense.objects.select_related('farm', 'batch', 'supplier')
    serializer_class = ExpenseSerializer
    not_found_message = 'Expense not found'


class ExpenseSummaryView(FarmScopedMixin, DateRangeMixin, generics.GenericAPIView):
    """
    GET /api/expenses/summary/
    """
    queryset = Expense.objects.all()

    def get(self, request):
        return Response(build_expense_summary(self.filter_date_range(self.get_queryset())))
