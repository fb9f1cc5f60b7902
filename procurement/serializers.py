"""
Serializers for suppliers.
"""

from rest_framework import serializers

from core.serializers import CleanModelSerializer
from expenses.models import Expense
from .models import Supplier
from .services import get_total_spent


class SupplierSerializer(CleanModelSerializer):
    name = serializers.CharField(max_length=255, allow_blank=True)
    phone = serializers.CharField(max_length=20, allow_blank=True)
    supplier_type_display = serializers.CharField(source='get_supplier_type_display', read_only=True)

    class Meta:
        model = Supplier
        fields = [
            'id', 'farm', 'name', 'supplier_type', 'supplier_type_display',
            'products', 'phone', 'email', 'location', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_farm(self, value):
        if self.instance is not None and value != self.instance.farm:
            raise serializers.ValidationError('Farm cannot be changed')
        return value


class SupplierExpenseSerializer(serializers.ModelSerializer):
    """Expense row inside a supplier's detail"""

    class Meta:
        model = Expense
        fields = ['id', 'batch', 'category', 'amount', 'date', 'description']
        read_only_fields = fields


class SupplierDetailSerializer(SupplierSerializer):
    """Supplier with the expenses paid to it"""
    expenses = SupplierExpenseSerializer(many=True, read_only=True)
    total_spent = serializers.SerializerMethodField()

    class Meta(SupplierSerializer.Meta):
        fields = SupplierSerializer.Meta.fields + ['expenses', 'total_spent']

    def get_total_spent(self, obj):
        return str(get_total_spent(obj))
