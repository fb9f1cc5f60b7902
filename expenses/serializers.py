"""
Serializers for expenses.
"""

from rest_framework import serializers

from core.serializers import CleanModelSerializer
from .models import Expense


class ExpenseSerializer(CleanModelSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    category_display = serializers.CharField(source='get_category_display', read_only=True)
    batch_species = serializers.CharField(source='batch.species', read_only=True, allow_null=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, allow_null=True)

    class Meta:
        model = Expense
        fields = [
            'id', 'farm', 'batch', 'batch_species', 'supplier', 'supplier_name',
            'category', 'category_display', 'amount', 'date', 'description',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
