"""
Record Validation Integration Tests

Domain rules on weight samples, egg collections, health records, water
readings and user settings come back as ``{field: [message]}`` errors.
"""

from datetime import date, timedelta

import pytest
from django.urls import reverse
from rest_framework import status

from accounts.models import UserSettings
from livestock.models import EggRecord, WaterQualityRecord, WeightSample
from medication_management.models import TreatmentRecord, VaccinationRecord

pytestmark = pytest.mark.django_db


# =============================================================================
# WEIGHT AND EGGS
# =============================================================================

class TestWeightSamples:

    def weigh(self, client, batch, **fields):
        payload = {
            'batch': str(batch.id),
            'date': date.today().isoformat(),
            'sample_size': 10,
            'average_weight_kg': '1.200',
        }
        payload.update(fields)
        return client.post(reverse('weight:weight-list'), payload, format='json')

    def test_valid_sample_is_saved(self, authenticated_client, batch):
        response = self.weigh(authenticated_client, batch, min_weight_kg='1.000', max_weight_kg='1.400')

        assert response.status_code == status.HTTP_201_CREATED
        assert WeightSample.objects.filter(batch=batch).count() == 1

    def test_min_above_max_is_rejected(self, authenticated_client, batch):
        response = self.weigh(authenticated_client, batch, min_weight_kg='1.500', max_weight_kg='1.100')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['min_weight_kg'] == ['Minimum weight cannot be greater than maximum weight']
        assert not WeightSample.objects.exists()

    def test_empty_sample_is_rejected(self, authenticated_client, batch):
        response = self.weigh(authenticated_client, batch, sample_size=0, average_weight_kg='0')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['sample_size'] == ['Sample size must be greater than 0']
        assert response.data['average_weight_kg'] == ['Average weight must be greater than 0']


class TestEggRecords:

    def collect(self, client, batch, collected, broken=0, sold=0):
        return client.post(reverse('eggs:egg-list'), {
            'batch': str(batch.id),
            'date': date.today().isoformat(),
            'quantity_collected': collected,
            'quantity_broken': broken,
            'quantity_sold': sold,
        }, format='json')

    def test_broken_and_sold_cannot_exceed_collected(self, authenticated_client, batch):
        response = self.collect(authenticated_client, batch, 50, broken=20, sold=40)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['quantity_collected'] == [
            'Broken and sold quantities cannot exceed collected quantity'
        ]
        assert not EggRecord.objects.exists()

    def test_negative_collection_is_rejected(self, authenticated_client, batch):
        response = self.collect(authenticated_client, batch, -5)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['quantity_collected'] == ['Quantity collected cannot be negative']

    def test_patch_is_checked_against_stored_counts(self, authenticated_client, batch):
        record_id = self.collect(authenticated_client, batch, 60, broken=5, sold=30).data['id']

        response = authenticated_client.patch(
            reverse('eggs:egg-detail', args=[record_id]), {'quantity_collected': 20}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert EggRecord.objects.get(pk=record_id).quantity_collected == 60


# =============================================================================
# HEALTH RECORDS
# =============================================================================

class TestHealthValidation:

    def test_next_dose_must_follow_administration(self, authenticated_client, batch):
        today = date.today()
        response = authenticated_client.post(reverse('health:vaccination-list'), {
            'batch': str(batch.id),
            'vaccine_name': 'Newcastle',
            'dosage': '1 drop',
            'date_administered': today.isoformat(),
            'next_due_date': (today - timedelta(days=1)).isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['next_due_date'] == ['Next due date must be after administration date']
        assert not VaccinationRecord.objects.exists()

    def test_vaccine_name_and_dosage_are_required(self, authenticated_client, batch):
        response = authenticated_client.post(reverse('health:vaccination-list'), {
            'batch': str(batch.id),
            'vaccine_name': '',
            'dosage': '',
            'date_administered': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['vaccine_name'] == ['Vaccine name is required']
        assert response.data['dosage'] == ['Dosage is required']

    def test_treatment_requires_reason_and_non_negative_withdrawal(self, authenticated_client, batch):
        response = authenticated_client.post(reverse('health:treatment-list'), {
            'batch': str(batch.id),
            'medication_name': 'Amprolium',
            'reason': '',
            'dosage': '1g/L',
            'date': date.today().isoformat(),
            'withdrawal_days': -3,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['reason'] == ['Reason is required']
        assert response.data['withdrawal_days'] == ['Withdrawal days cannot be negative']
        assert not TreatmentRecord.objects.exists()

    def test_treatment_requires_medication_name(self, authenticated_client, batch):
        response = authenticated_client.post(reverse('health:treatment-list'), {
            'batch': str(batch.id),
            'medication_name': '',
            'reason': 'Coccidiosis',
            'dosage': '1g/L',
            'date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['medication_name'] == ['Medication name is required']


# =============================================================================
# WATER QUALITY
# =============================================================================

class TestWaterQuality:

    def read(self, client, batch, **fields):
        payload = {
            'batch': str(batch.id),
            'date': date.today().isoformat(),
            'ph': '7.20',
            'temperature_celsius': '27.50',
            'dissolved_oxygen_mg_l': '6.50',
            'ammonia_mg_l': '0.020',
        }
        payload.update(fields)
        return client.post(reverse('water_quality:water-quality-list'), payload, format='json')

    def test_create_list_update_delete(self, authenticated_client, batch):
        response = self.read(authenticated_client, batch)
        assert response.status_code == status.HTTP_201_CREATED
        record_id = response.data['id']

        response = authenticated_client.get(reverse('water_quality:water-quality-list'))
        assert response.data['total'] == 1
        assert response.data['data'][0]['batch_species'] == 'Broiler'

        url = reverse('water_quality:water-quality-detail', args=[record_id])
        response = authenticated_client.patch(url, {'ph': '6.80'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['ph'] == '6.80'

        assert authenticated_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert not WaterQualityRecord.objects.exists()

    def test_unsafe_reading_is_still_recorded(self, authenticated_client, batch):
        response = self.read(authenticated_client, batch, ph='9.10', ammonia_mg_l='3.500')

        assert response.status_code == status.HTTP_201_CREATED

    def test_physically_impossible_reading_is_rejected(self, authenticated_client, batch):
        response = self.read(authenticated_client, batch, ph='15.00', ammonia_mg_l='-1.000')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['ph'] == ['pH must be between 0 and 14']
        assert response.data['ammonia_mg_l'] == ['Ammonia cannot be negative']

    def test_other_farms_reading_is_not_found(self, authenticated_client, other_batch):
        record = WaterQualityRecord.objects.create(
            batch=other_batch, date=date.today(), ph='7.00', temperature_celsius='26.00',
            dissolved_oxygen_mg_l='6.00', ammonia_mg_l='0.100',
        )

        response = authenticated_client.get(reverse('water_quality:water-quality-detail', args=[record.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Water quality record not found'}


# =============================================================================
# USER SETTINGS
# =============================================================================

class TestSettingsValidation:

    @pytest.mark.parametrize('field, value, message', [
        ('low_stock_threshold_percent', 101, 'Low stock threshold must be between 1 and 100'),
        ('low_stock_threshold_percent', 0, 'Low stock threshold must be between 1 and 100'),
        ('mortality_alert_percent', 0, 'Mortality alert percent must be between 1 and 100'),
        ('mortality_alert_quantity', 0, 'Mortality alert quantity must be at least 1'),
    ])
    def test_out_of_range_threshold_is_rejected(self, authenticated_client, farmer, field, value, message):
        response = authenticated_client.patch(reverse('accounts:settings'), {field: value}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data[field] == [message]
        assert getattr(UserSettings.for_user(farmer), field) != value

    def test_valid_threshold_is_saved(self, authenticated_client, farmer):
        response = authenticated_client.patch(
            reverse('accounts:settings'), {'low_stock_threshold_percent': 25}, format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert UserSettings.for_user(farmer).low_stock_threshold_percent == 25
