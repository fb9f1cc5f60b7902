"""
Batch Lifecycle Integration Tests

SCENARIO:
=========
A broiler farmer places 100 birds and records losses against them:
- Creating the batch sets current quantity to the initial 100
- Recording 15 deaths leaves 85 birds; deleting that record gives back 100
- Editing a record moves the batch by the change in quantity
- A batch with records cannot be deleted until the records are gone
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from livestock.models import Batch, MortalityRecord

pytestmark = pytest.mark.django_db


# =============================================================================
# BATCH CREATION
# =============================================================================

class TestBatchCreation:

    def test_current_quantity_starts_at_initial(self, authenticated_client, farm):
        response = authenticated_client.post(reverse('livestock:batch-list'), {
            'farm': str(farm.id),
            'livestock_type': 'poultry',
            'species': 'Broiler',
            'initial_quantity': 100,
            'cost_per_unit': '12.50',
            'acquisition_date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['current_quantity'] == 100
        assert response.data['status'] == 'active'
        assert Decimal(response.data['total_cost']) == Decimal('1250.00')

    def test_zero_quantity_is_rejected(self, authenticated_client, farm):
        response = authenticated_client.post(reverse('livestock:batch-list'), {
            'farm': str(farm.id),
            'livestock_type': 'poultry',
            'species': 'Broiler',
            'initial_quantity': 0,
            'cost_per_unit': '1.00',
            'acquisition_date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['initial_quantity'] == ['Initial quantity must be greater than 0']

    def test_missing_species_is_rejected(self, authenticated_client, farm):
        response = authenticated_client.post(reverse('livestock:batch-list'), {
            'farm': str(farm.id),
            'livestock_type': 'fish',
            'species': '',
            'initial_quantity': 10,
            'cost_per_unit': '1.00',
            'acquisition_date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['species'] == ['Species is required']

    def test_harvest_date_must_follow_acquisition(self, authenticated_client, farm):
        today = date.today()
        response = authenticated_client.post(reverse('livestock:batch-list'), {
            'farm': str(farm.id),
            'livestock_type': 'poultry',
            'species': 'Broiler',
            'initial_quantity': 10,
            'cost_per_unit': '1.00',
            'acquisition_date': today.isoformat(),
            'target_harvest_date': today.isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'target_harvest_date' in response.data


# =============================================================================
# MORTALITY BOOKKEEPING
# =============================================================================

class TestMortalityBookkeeping:

    def record(self, client, batch, quantity):
        return client.post(reverse('mortality:mortality-list'), {
            'batch': str(batch.id),
            'quantity': quantity,
            'date': date.today().isoformat(),
            'cause': 'disease',
        }, format='json')

    def test_mortality_draws_batch_down_and_delete_restores(self, authenticated_client, batch):
        response = self.record(authenticated_client, batch, 15)
        assert response.status_code == status.HTTP_201_CREATED

        batch.refresh_from_db()
        assert batch.current_quantity == 85

        response = authenticated_client.delete(
            reverse('mortality:mortality-detail', args=[response.data['id']])
        )
        assert response.status_code == status.HTTP_204_NO_CONTENT

        batch.refresh_from_db()
        assert batch.current_quantity == 100

    def test_mortality_cannot_exceed_current_quantity(self, authenticated_client, batch):
        response = self.record(authenticated_client, batch, 101)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Mortality quantity cannot exceed current batch quantity'}
        batch.refresh_from_db()
        assert batch.current_quantity == 100
        assert not MortalityRecord.objects.exists()

    def test_zero_mortality_is_rejected(self, authenticated_client, batch):
        response = self.record(authenticated_client, batch, 0)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['quantity'] == ['Mortality quantity must be greater than 0']

    def test_losing_every_animal_depletes_batch(self, authenticated_client, batch):
        response = self.record(authenticated_client, batch, 100)
        assert response.status_code == status.HTTP_201_CREATED

        batch.refresh_from_db()
        assert batch.current_quantity == 0
        assert batch.status == Batch.STATUS_DEPLETED

        authenticated_client.delete(reverse('mortality:mortality-detail', args=[response.data['id']]))
        batch.refresh_from_db()
        assert batch.current_quantity == 100
        assert batch.status == Batch.STATUS_ACTIVE

    def test_deleting_mortality_reactivates_sold_batch(self, authenticated_client, farm, batch):
        mortality_id = self.record(authenticated_client, batch, 10).data['id']
        response = authenticated_client.post(reverse('sales:sale-list'), {
            'farm': str(farm.id),
            'batch': str(batch.id),
            'livestock_type': 'poultry',
            'quantity': 90,
            'unit_type': 'bird',
            'unit_price': '45.00',
            'date': date.today().isoformat(),
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        batch.refresh_from_db()
        assert batch.status == Batch.STATUS_SOLD

        authenticated_client.delete(reverse('mortality:mortality-detail', args=[mortality_id]))

        batch.refresh_from_db()
        assert batch.current_quantity == 10
        assert batch.status == Batch.STATUS_ACTIVE

    def test_update_moves_batch_by_difference(self, authenticated_client, batch):
        record_id = self.record(authenticated_client, batch, 10).data['id']

        response = authenticated_client.patch(
            reverse('mortality:mortality-detail', args=[record_id]),
            {'quantity': 25},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        batch.refresh_from_db()
        assert batch.current_quantity == 75

        authenticated_client.patch(
            reverse('mortality:mortality-detail', args=[record_id]),
            {'quantity': 5},
            format='json',
        )
        batch.refresh_from_db()
        assert batch.current_quantity == 95

    def test_batch_cannot_be_changed_on_update(self, authenticated_client, batch, farm):
        other = Batch.objects.create(
            farm=farm, livestock_type='poultry', species='Layer',
            initial_quantity=50, acquisition_date=date.today() - timedelta(days=5),
        )
        record_id = self.record(authenticated_client, batch, 5).data['id']

        response = authenticated_client.patch(
            reverse('mortality:mortality-detail', args=[record_id]),
            {'batch': str(other.id)},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['batch'] == ['Batch cannot be changed']


# =============================================================================
# BATCH DELETION
# =============================================================================

class TestBatchDeletion:

    def test_batch_with_records_cannot_be_deleted(self, authenticated_client, batch):
        MortalityRecord.objects.create(batch=batch, quantity=1, date=date.today())

        response = authenticated_client.delete(reverse('livestock:batch-detail', args=[batch.id]))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            'error': 'Cannot delete batch with existing records. Delete related records first.'
        }
        assert Batch.objects.filter(pk=batch.pk).exists()

    def test_empty_batch_can_be_deleted(self, authenticated_client, batch):
        response = authenticated_client.delete(reverse('livestock:batch-detail', args=[batch.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Batch.objects.filter(pk=batch.pk).exists()

    def test_missing_batch_returns_not_found(self, authenticated_client, farm):
        response = authenticated_client.get(
            reverse('livestock:batch-detail', args=['00000000-0000-0000-0000-000000000000'])
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Batch not found'}


# =============================================================================
# BATCH STATS
# =============================================================================

class TestBatchStats:

    def test_stats_report_mortality_rate(self, authenticated_client, batch):
        authenticated_client.post(reverse('mortality:mortality-list'), {
            'batch': str(batch.id), 'quantity': 8, 'date': date.today().isoformat(),
        }, format='json')

        response = authenticated_client.get(reverse('livestock:batch-stats', args=[batch.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['mortality']['total_quantity'] == 8
        assert response.data['mortality']['rate'] == 8.0
        assert response.data['batch']['current_quantity'] == 92
