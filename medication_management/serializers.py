"""
Serializers for vaccination and treatment records.
"""

from rest_framework import serializers

from core.serializers import CleanModelSerializer
from .models import TreatmentRecord, VaccinationRecord
from .services import days_remaining_in_withdrawal, is_in_withdrawal_period


class VaccinationRecordSerializer(CleanModelSerializer):
    vaccine_name = serializers.CharField(max_length=200, allow_blank=True)
    dosage = serializers.CharField(max_length=100, allow_blank=True)
    batch_species = serializers.CharField(source='batch.species', read_only=True)
    farm = serializers.UUIDField(source='batch.farm_id', read_only=True)

    class Meta:
        model = VaccinationRecord
        fields = [
            'id', 'batch', 'batch_species', 'farm', 'vaccine_name',
            'date_administered', 'dosage', 'next_due_date', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class TreatmentRecordSerializer(CleanModelSerializer):
    medication_name = serializers.CharField(max_length=200, allow_blank=True)
    reason = serializers.CharField(max_length=255, allow_blank=True)
    dosage = serializers.CharField(max_length=100, allow_blank=True)
    batch_species = serializers.CharField(source='batch.species', read_only=True)
    farm = serializers.UUIDField(source='batch.farm_id', read_only=True)
    in_withdrawal = serializers.SerializerMethodField()
    withdrawal_days_remaining = serializers.SerializerMethodField()

    class Meta:
        model = TreatmentRecord
        fields = [
            'id', 'batch', 'batch_species', 'farm', 'medication_name', 'reason',
            'date', 'dosage', 'withdrawal_days', 'in_withdrawal',
            'withdrawal_days_remaining', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_in_withdrawal(self, obj):
        return is_in_withdrawal_period(obj.date, obj.withdrawal_days)

    def get_withdrawal_days_remaining(self, obj):
        return days_remaining_in_withdrawal(obj.date, obj.withdrawal_days)

