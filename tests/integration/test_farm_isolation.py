"""
Farm Isolation Integration Tests

One farmer never sees or changes another farmer's records. Viewers on a
shared farm can read but not write.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from farms.models import FarmMembership
from farms.services import create_farm
from feed_inventory.models import FeedInventory, FeedRecord
from livestock.models import Batch
from sales_revenue.models import Sale

pytestmark = pytest.mark.django_db


ACCESS_DENIED = {'error': 'Access denied to this farm'}


class TestReadIsolation:

    def test_lists_only_show_own_farms(self, authenticated_client, batch, other_batch):
        response = authenticated_client.get(reverse('livestock:batch-list'))

        ids = [row['id'] for row in response.data['data']]
        assert ids == [str(batch.id)]

    def test_other_farms_batch_is_not_found(self, authenticated_client, other_batch):
        response = authenticated_client.get(reverse('livestock:batch-detail', args=[other_batch.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requesting_other_farm_id_is_denied(self, authenticated_client, farm, other_farm):
        response = authenticated_client.get(reverse('livestock:batch-list'), {'farm_id': str(other_farm.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == ACCESS_DENIED

    def test_malformed_farm_id_is_denied(self, authenticated_client, farm):
        response = authenticated_client.get(reverse('sales:sale-list'), {'farm_id': 'not-a-uuid'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_farm_list_excludes_other_farms(self, authenticated_client, farm, other_farm):
        response = authenticated_client.get(reverse('farms:farm-list'))

        assert [row['id'] for row in response.data['data']] == [str(farm.id)]

    def test_dashboard_only_counts_own_batches(self, authenticated_client, batch, other_batch):
        response = authenticated_client.get(reverse('dashboard:dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['farm_count'] == 1
        assert response.data['inventory']['total_batches'] == 1
        assert response.data['inventory']['total_quantity'] == 100

    def test_unauthenticated_request_is_rejected(self, api_client, batch):
        response = api_client.get(reverse('livestock:batch-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestWriteIsolation:

    def test_cannot_create_batch_on_other_farm(self, authenticated_client, other_farm):
        response = authenticated_client.post(reverse('livestock:batch-list'), {
            'farm': str(other_farm.id),
            'livestock_type': 'poultry',
            'species': 'Broiler',
            'initial_quantity': 10,
            'cost_per_unit': '1.00',
            'acquisition_date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == ACCESS_DENIED
        assert not Batch.objects.filter(farm=other_farm, species='Broiler').exists()

    def test_cannot_record_mortality_on_other_farms_batch(self, authenticated_client, other_batch):
        response = authenticated_client.post(reverse('mortality:mortality-list'), {
            'batch': str(other_batch.id),
            'quantity': 5,
            'date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        other_batch.refresh_from_db()
        assert other_batch.current_quantity == 500

    def test_sale_batch_must_belong_to_sale_farm(self, authenticated_client, farm, other_batch):
        response = authenticated_client.post(reverse('sales:sale-list'), {
            'farm': str(farm.id),
            'batch': str(other_batch.id),
            'livestock_type': 'fish',
            'quantity': 5,
            'unit_price': '10.00',
            'date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['batch'] == ['Batch does not belong to this farm']
        assert not Sale.objects.exists()

    def test_moving_sale_to_another_farm_keeps_batch_check(self, authenticated_client, farmer, farm, batch):
        north = create_farm(farmer, name='North Farm', location='Tamale', farm_type='poultry')
        response = authenticated_client.post(reverse('sales:sale-list'), {
            'farm': str(farm.id),
            'batch': str(batch.id),
            'livestock_type': 'poultry',
            'quantity': 10,
            'unit_type': 'bird',
            'unit_price': '45.00',
            'date': date.today().isoformat(),
        }, format='json')
        sale_id = response.data['id']

        response = authenticated_client.patch(
            reverse('sales:sale-detail', args=[sale_id]), {'farm': str(north.id)}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['batch'] == ['Batch does not belong to this farm']
        assert Sale.objects.get(pk=sale_id).farm_id == farm.id

    def test_moving_feed_record_to_another_farms_batch_keeps_inventory_check(
        self, authenticated_client, farmer, farm, batch
    ):
        north = create_farm(farmer, name='North Farm', location='Tamale', farm_type='poultry')
        north_batch = Batch.objects.create(
            farm=north, livestock_type='poultry', species='Layer',
            initial_quantity=40, acquisition_date=date.today(),
        )
        inventory = FeedInventory.objects.create(farm=farm, feed_type='grower', quantity_kg=Decimal('100.00'))
        response = authenticated_client.post(reverse('feed:feed-list'), {
            'batch': str(batch.id),
            'inventory': str(inventory.id),
            'feed_type': 'grower',
            'quantity_kg': '20.00',
            'cost': '40.00',
            'date': date.today().isoformat(),
        }, format='json')
        record_id = response.data['id']

        response = authenticated_client.patch(
            reverse('feed:feed-detail', args=[record_id]), {'batch': str(north_batch.id)}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['inventory'] == ['Inventory does not belong to this farm']
        assert FeedRecord.objects.get(pk=record_id).batch_id == batch.id


class TestMembershipRoles:

    def test_viewer_can_read_but_not_write(self, api_client, other_farmer, farm, batch):
        FarmMembership.objects.create(user=other_farmer, farm=farm, role=FarmMembership.ROLE_VIEWER)
        api_client.force_authenticate(user=other_farmer)

        response = api_client.get(reverse('livestock:batch-detail', args=[batch.id]))
        assert response.status_code == status.HTTP_200_OK

        response = api_client.patch(
            reverse('livestock:batch-detail', args=[batch.id]), {'notes': 'moved'}, format='json'
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == ACCESS_DENIED

    def test_manager_can_write(self, api_client, other_farmer, farm, batch):
        FarmMembership.objects.create(user=other_farmer, farm=farm, role=FarmMembership.ROLE_MANAGER)
        api_client.force_authenticate(user=other_farmer)

        response = api_client.post(reverse('sales:sale-list'), {
            'farm': str(farm.id),
            'batch': str(batch.id),
            'livestock_type': 'poultry',
            'quantity': 10,
            'unit_price': '40.00',
            'date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.data['total_amount']) == Decimal('400.00')
