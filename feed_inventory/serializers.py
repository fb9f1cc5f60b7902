"""
Serializers for feed records, feed inventory and saved formulations.
"""

from rest_framework import serializers

from core.serializers import CleanModelSerializer
from .models import FeedInventory, FeedRecord, SavedFormulation


# =============================================================================
# FEED RECORD SERIALIZERS
# =============================================================================

class FeedRecordSerializer(CleanModelSerializer):
    """Feed record; quantity and cost are validated in FeedRecord.clean()"""
    quantity_kg = serializers.DecimalField(max_digits=10, decimal_places=2)
    cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    feed_type_display = serializers.CharField(source='get_feed_type_display', read_only=True)
    batch_species = serializers.CharField(source='batch.species', read_only=True)
    farm = serializers.UUIDField(source='batch.farm_id', read_only=True)

    class Meta:
        model = FeedRecord
        fields = [
            'id', 'batch', 'batch_species', 'farm', 'inventory', 'feed_type',
            'feed_type_display', 'quantity_kg', 'cost', 'date', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        attrs = super().validate(attrs)
        batch = attrs.get('batch', getattr(self.instance, 'batch', None))
        inventory = attrs.get('inventory', getattr(self.instance, 'inventory', None))
        if inventory is not None and batch is not None and inventory.farm_id != batch.farm_id:
            raise serializers.ValidationError({'inventory': 'Inventory does not belong to this farm'})
        return attrs


# =============================================================================
# FEED INVENTORY SERIALIZERS
# =============================================================================

class FeedInventorySerializer(CleanModelSerializer):
    quantity_kg = serializers.DecimalField(max_digits=10, decimal_places=2)
    feed_type_display = serializers.CharField(source='get_feed_type_display', read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = FeedInventory
        fields = [
            'id', 'farm', 'feed_type', 'feed_type_display', 'quantity_kg',
            'min_threshold_kg', 'is_low_stock', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        validators = []

    def validate(self, attrs):
        attrs = super().validate(attrs)
        farm = attrs.get('farm') or getattr(self.instance, 'farm', None)
        feed_type = attrs.get('feed_type') or getattr(self.instance, 'feed_type', None)
        duplicates = FeedInventory.objects.filter(farm=farm, feed_type=feed_type)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError({'feed_type': 'Inventory for this feed type already exists'})
        return attrs


# =============================================================================
# FORMULATION SERIALIZERS
# =============================================================================

class SavedFormulationSerializer(CleanModelSerializer):
    total_batch_cost = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = SavedFormulation
        fields = [
            'id', 'name', 'species', 'production_stage', 'batch_size_kg',
            'ingredients', 'total_cost_per_kg', 'total_batch_cost',
            'nutritional_values', 'mixing_instructions', 'share_code',
            'usage_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'share_code', 'usage_count', 'created_at', 'updated_at']


class SharedFormulationSerializer(serializers.ModelSerializer):
    """Public, read-only view of a shared formulation"""
    total_batch_cost = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = SavedFormulation
        fields = [
            'name', 'species', 'production_stage', 'batch_size_kg',
            'total_cost_per_kg', 'total_batch_cost', 'ingredients',
            'nutritional_values', 'mixing_instructions'
        ]
        read_only_fields = fields
