"""
Feed and Formulation Integration Tests

- Feed records drawn from an inventory row deduct and restore its stock
- Saved formulations can be shared through a public share code
- The public lookup is rate limited per client IP
"""

from datetime import date
from decimal import Decimal

import pytest
from django.test import override_settings
from django.urls import reverse
from rest_framework import status

from feed_inventory.models import FeedInventory, SavedFormulation

pytestmark = pytest.mark.django_db


@pytest.fixture
def inventory(farm):
    return FeedInventory.objects.create(
        farm=farm, feed_type='grower', quantity_kg=Decimal('100.00'), min_threshold_kg=Decimal('20.00'),
    )


@pytest.fixture
def formulation(farmer):
    return SavedFormulation.objects.create(
        owner=farmer,
        name='Broiler Grower Mix',
        species='Broiler',
        production_stage='Grower',
        batch_size_kg=Decimal('100.00'),
        total_cost_per_kg=Decimal('5.20'),
        ingredients=[
            {'name': 'Maize', 'percentage': 60},
            {'name': 'Soybean meal', 'percentage': 30},
            {'name': 'Fish meal', 'percentage': 10},
        ],
    )


class TestFeedInventory:

    def feed(self, client, batch, inventory, quantity):
        return client.post(reverse('feed:feed-list'), {
            'batch': str(batch.id),
            'inventory': str(inventory.id),
            'feed_type': 'grower',
            'quantity_kg': quantity,
            'cost': '50.00',
            'date': date.today().isoformat(),
        }, format='json')

    def test_feed_record_deducts_and_delete_restores(self, authenticated_client, batch, inventory):
        response = self.feed(authenticated_client, batch, inventory, '30.00')
        assert response.status_code == status.HTTP_201_CREATED

        inventory.refresh_from_db()
        assert inventory.quantity_kg == Decimal('70.00')

        authenticated_client.delete(reverse('feed:feed-detail', args=[response.data['id']]))
        inventory.refresh_from_db()
        assert inventory.quantity_kg == Decimal('100.00')

    def test_feed_beyond_stock_is_rejected(self, authenticated_client, batch, inventory):
        response = self.feed(authenticated_client, batch, inventory, '150.00')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Insufficient inventory. Available: 100.00kg'}
        inventory.refresh_from_db()
        assert inventory.quantity_kg == Decimal('100.00')

    def test_update_moves_inventory_by_difference(self, authenticated_client, batch, inventory):
        record_id = self.feed(authenticated_client, batch, inventory, '30.00').data['id']
        url = reverse('feed:feed-detail', args=[record_id])

        response = authenticated_client.patch(url, {'quantity_kg': '50.00'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        inventory.refresh_from_db()
        assert inventory.quantity_kg == Decimal('50.00')

        authenticated_client.patch(url, {'quantity_kg': '10.00'}, format='json')
        inventory.refresh_from_db()
        assert inventory.quantity_kg == Decimal('90.00')

    def test_update_beyond_stock_is_rejected(self, authenticated_client, batch, inventory):
        record_id = self.feed(authenticated_client, batch, inventory, '30.00').data['id']

        response = authenticated_client.patch(
            reverse('feed:feed-detail', args=[record_id]), {'quantity_kg': '140.00'}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        inventory.refresh_from_db()
        assert inventory.quantity_kg == Decimal('70.00')

    def test_switching_inventory_restores_old_row(self, authenticated_client, farm, batch, inventory):
        starter = FeedInventory.objects.create(farm=farm, feed_type='starter', quantity_kg=Decimal('60.00'))
        record_id = self.feed(authenticated_client, batch, inventory, '30.00').data['id']

        response = authenticated_client.patch(
            reverse('feed:feed-detail', args=[record_id]),
            {'inventory': str(starter.id), 'feed_type': 'starter', 'quantity_kg': '25.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        inventory.refresh_from_db()
        starter.refresh_from_db()
        assert inventory.quantity_kg == Decimal('100.00')
        assert starter.quantity_kg == Decimal('35.00')

    def test_summary_totals(self, authenticated_client, batch, inventory):
        self.feed(authenticated_client, batch, inventory, '10.50')
        self.feed(authenticated_client, batch, inventory, '4.25')

        response = authenticated_client.get(reverse('feed:feed-summary'))

        assert response.data['total_quantity_kg'] == 14.75
        assert response.data['record_count'] == 2
        assert response.data['by_type']['grower']['cost'] == 100.0


class TestSharedFormulations:

    def test_owner_can_share_and_anyone_can_look_up(self, authenticated_client, api_client, formulation):
        response = authenticated_client.post(reverse('formulations:formulation-share', args=[formulation.id]))
        assert response.status_code == status.HTTP_200_OK
        code = response.data['share_code']
        assert len(code) == 8

        api_client.force_authenticate(user=None)
        response = api_client.get(reverse('shared-formulation', args=[code.lower()]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Broiler Grower Mix'
        assert Decimal(response.data['total_batch_cost']) == Decimal('520.00')
        formulation.refresh_from_db()
        assert formulation.usage_count == 1

    def test_unknown_code_is_not_found(self, api_client):
        response = api_client.get(reverse('shared-formulation', args=['ZZZZZZZZ']))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Formulation not found'}

    @override_settings(SHARED_FORMULATION_RATE_LIMIT=3)
    def test_lookup_is_rate_limited(self, api_client, formulation):
        formulation.share_code = 'ABCD1234'
        formulation.save()
        url = reverse('shared-formulation', args=['ABCD1234'])

        for _ in range(3):
            assert api_client.get(url, REMOTE_ADDR='10.0.0.7').status_code == status.HTTP_200_OK

        response = api_client.get(url, REMOTE_ADDR='10.0.0.7')
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert int(response['Retry-After']) > 0

        # Another client is unaffected
        assert api_client.get(url, REMOTE_ADDR='10.0.0.8').status_code == status.HTTP_200_OK

    def test_formulations_are_private_to_owner(self, api_client, other_farmer, formulation):
        api_client.force_authenticate(user=other_farmer)

        response = api_client.get(reverse('formulations:formulation-detail', args=[formulation.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
