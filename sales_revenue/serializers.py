"""
Serializers for sales and customers.
"""

from rest_framework import serializers

from core.serializers import CleanModelSerializer
from .models import Customer, Sale


# =============================================================================
# SALE SERIALIZERS
# =============================================================================

class SaleSerializer(CleanModelSerializer):
    """
    Sale record. ``total_amount`` is always quantity times unit price.

    The batch and customer, when given, must belong to the sale's farm.
    """
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    farm_name = serializers.CharField(source='farm.name', read_only=True)
    batch_species = serializers.CharField(source='batch.species', read_only=True, allow_null=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True, allow_null=True)
    livestock_type_display = serializers.CharField(source='get_livestock_type_display', read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id', 'farm', 'farm_name', 'batch', 'batch_species',
            'customer', 'customer_name', 'livestock_type', 'livestock_type_display',
            'quantity', 'unit_type', 'unit_price', 'total_amount', 'date',
            'payment_status', 'payment_method', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'total_amount', 'created_at', 'updated_at']

    def validate(self, attrs):
        attrs = super().validate(attrs)
        farm = attrs.get('farm', getattr(self.instance, 'farm', None))
        batch = attrs.get('batch', getattr(self.instance, 'batch', None))
        customer = attrs.get('customer', getattr(self.instance, 'customer', None))

        errors = {}
        if batch is not None and farm is not None and batch.farm_id != farm.id:
            errors['batch'] = 'Batch does not belong to this farm'
        if customer is not None and farm is not None and customer.farm_id != farm.id:
            errors['customer'] = 'Customer does not belong to this farm'
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class CustomerSaleSerializer(serializers.ModelSerializer):
    """Sale row inside a customer's purchase history"""

    class Meta:
        model = Sale
        fields = [
            'id', 'batch', 'livestock_type', 'quantity', 'unit_type',
            'unit_price', 'total_amount', 'date', 'payment_status'
        ]
        read_only_fields = fields


# =============================================================================
# CUSTOMER SERIALIZERS
# =============================================================================

class CustomerSerializer(CleanModelSerializer):
    name = serializers.CharField(max_length=255, allow_blank=True)
    phone = serializers.CharField(max_length=20, allow_blank=True)
    customer_type_display = serializers.CharField(source='get_customer_type_display', read_only=True)

    class Meta:
        model = Customer
        fields = [
            'id', 'farm', 'name', 'phone', 'email', 'location',
            'customer_type', 'customer_type_display', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_farm(self, value):
        if self.instance is not None and value != self.instance.farm:
            raise serializers.ValidationError('Farm cannot be changed')
        return value


class CustomerDetailSerializer(CustomerSerializer):
    """Customer with purchase totals and sales history"""
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    sales_count = serializers.IntegerField(read_only=True)
    sales = CustomerSaleSerializer(many=True, read_only=True)

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ['total_spent', 'sales_count', 'sales']


class TopCustomerSerializer(serializers.ModelSerializer):
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    sales_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Customer
        fields = ['id', 'farm', 'name', 'phone', 'customer_type', 'total_spent', 'sales_count']
        read_only_fields = fields
