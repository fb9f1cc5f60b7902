"""
Serializers for batches and the records kept against them.
"""

from rest_framework import serializers

from core.serializers import CleanModelSerializer
from .models import Batch, EggRecord, MortalityRecord, WaterQualityRecord, WeightSample
from .services import calculate_laying_percentage


# =============================================================================
# BATCH SERIALIZERS
# =============================================================================

class BatchListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for batch lists"""
    farm_name = serializers.CharField(source='farm.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Batch
        fields = [
            'id', 'farm', 'farm_name', 'livestock_type', 'species', 'breed',
            'batch_name', 'initial_quantity', 'current_quantity',
            'acquisition_date', 'cost_per_unit', 'total_cost',
            'status', 'status_display', 'created_at'
        ]
        read_only_fields = fields


class BatchCreateSerializer(CleanModelSerializer):
    """Serializer for creating batches; current quantity and total cost are derived"""
    initial_quantity = serializers.IntegerField()
    cost_per_unit = serializers.DecimalField(max_digits=12, decimal_places=2)
    species = serializers.CharField(max_length=100, allow_blank=True)

    class Meta:
        model = Batch
        fields = [
            'farm', 'livestock_type', 'species', 'breed', 'batch_name',
            'initial_quantity', 'acquisition_date', 'cost_per_unit',
            'supplier', 'target_harvest_date', 'target_weight_g', 'notes'
        ]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        supplier = attrs.get('supplier')
        if supplier is not None and supplier.farm_id != attrs['farm'].id:
            raise serializers.ValidationError({'supplier': 'Supplier does not belong to this farm'})
        return attrs


class BatchDetailSerializer(CleanModelSerializer):
    """
    Detailed serializer for viewing and editing a batch.

    Quantities and acquisition cost are fixed once a batch exists; quantity
    changes flow through mortality and sales records.
    """
    farm_name = serializers.CharField(source='farm.name', read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, allow_null=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    species = serializers.CharField(max_length=100, required=False, allow_blank=True)

    class Meta:
        model = Batch
        fields = [
            'id', 'farm', 'farm_name', 'livestock_type', 'species', 'breed',
            'batch_name', 'initial_quantity', 'current_quantity',
            'acquisition_date', 'cost_per_unit', 'total_cost',
            'supplier', 'supplier_name', 'status', 'status_display',
            'target_harvest_date', 'target_weight_g', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'farm', 'livestock_type', 'initial_quantity', 'current_quantity',
            'acquisition_date', 'cost_per_unit', 'total_cost', 'created_at', 'updated_at'
        ]

    def validate_supplier(self, value):
        if value is not None and self.instance is not None and value.farm_id != self.instance.farm_id:
            raise serializers.ValidationError('Supplier does not belong to this farm')
        return value


# =============================================================================
# MORTALITY SERIALIZERS
# =============================================================================

class MortalityRecordSerializer(CleanModelSerializer):
    """Mortality record; the batch cannot be changed after creation"""
    quantity = serializers.IntegerField()
    cause_display = serializers.CharField(source='get_cause_display', read_only=True)
    batch_species = serializers.CharField(source='batch.species', read_only=True)
    batch_name = serializers.CharField(source='batch.batch_name', read_only=True)
    farm = serializers.UUIDField(source='batch.farm_id', read_only=True)

    class Meta:
        model = MortalityRecord
        fields = [
            'id', 'batch', 'batch_species', 'batch_name', 'farm',
            'quantity', 'date', 'cause', 'cause_display', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_batch(self, value):
        if self.instance is not None and value != self.instance.batch:
            raise serializers.ValidationError('Batch cannot be changed')
        return value


# =============================================================================
# WEIGHT SERIALIZERS
# =============================================================================

class WeightSampleSerializer(CleanModelSerializer):
    sample_size = serializers.IntegerField()
    batch_species = serializers.CharField(source='batch.species', read_only=True)

    class Meta:
        model = WeightSample
        fields = [
            'id', 'batch', 'batch_species', 'date', 'sample_size',
            'average_weight_kg', 'min_weight_kg', 'max_weight_kg', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


# =============================================================================
# EGG SERIALIZERS
# =============================================================================

class EggRecordSerializer(CleanModelSerializer):
    batch_species = serializers.CharField(source='batch.species', read_only=True)
    laying_percentage = serializers.SerializerMethodField()

    class Meta:
        model = EggRecord
        fields = [
            'id', 'batch', 'batch_species', 'date', 'quantity_collected',
            'quantity_broken', 'quantity_sold', 'laying_percentage', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_laying_percentage(self, obj):
        return calculate_laying_percentage(obj.quantity_collected, obj.batch.current_quantity)


# =============================================================================
# WATER QUALITY SERIALIZERS
# =============================================================================

class WaterQualityRecordSerializer(CleanModelSerializer):
    batch_species = serializers.CharField(source='batch.species', read_only=True)

    class Meta:
        model = WaterQualityRecord
        fields = [
            'id', 'batch', 'batch_species', 'date', 'ph', 'temperature_celsius',
            'dissolved_oxygen_mg_l', 'ammonia_mg_l', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
