"""
Sales Stock Integration Tests

SCENARIO:
=========
A farmer sells broilers out of a batch of 100:
- Each sale draws the batch down; selling the last bird marks it sold
- Overselling is rejected with the available and requested counts
- Editing and deleting a sale moves the stock back
- Egg sales never change the flock size
"""

from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from livestock.models import Batch
from sales_revenue.models import Customer, Sale

pytestmark = pytest.mark.django_db


def sale_payload(farm, batch, quantity, **extra):
    payload = {
        'farm': str(farm.id),
        'batch': str(batch.id),
        'livestock_type': 'poultry',
        'quantity': quantity,
        'unit_type': 'bird',
        'unit_price': '45.00',
        'date': date.today().isoformat(),
    }
    payload.update(extra)
    return payload


class TestSaleStock:

    def test_sale_draws_batch_down(self, authenticated_client, farm, batch):
        response = authenticated_client.post(reverse('sales:sale-list'), sale_payload(farm, batch, 30), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.data['total_amount']) == Decimal('1350.00')
        batch.refresh_from_db()
        assert batch.current_quantity == 70

    def test_oversell_is_rejected(self, authenticated_client, farm, batch):
        response = authenticated_client.post(reverse('sales:sale-list'), sale_payload(farm, batch, 150), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Insufficient stock in batch. Available: 100, Requested: 150'}
        batch.refresh_from_db()
        assert batch.current_quantity == 100
        assert not Sale.objects.exists()

    def test_selling_everything_marks_batch_sold(self, authenticated_client, farm, batch):
        authenticated_client.post(reverse('sales:sale-list'), sale_payload(farm, batch, 100), format='json')

        batch.refresh_from_db()
        assert batch.current_quantity == 0
        assert batch.status == Batch.STATUS_SOLD

    def test_delete_restores_stock_and_reactivates(self, authenticated_client, farm, batch):
        sale_id = authenticated_client.post(
            reverse('sales:sale-list'), sale_payload(farm, batch, 100), format='json'
        ).data['id']

        response = authenticated_client.delete(reverse('sales:sale-detail', args=[sale_id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        batch.refresh_from_db()
        assert batch.current_quantity == 100
        assert batch.status == Batch.STATUS_ACTIVE

    def test_update_moves_stock_by_difference(self, authenticated_client, farm, batch):
        sale_id = authenticated_client.post(
            reverse('sales:sale-list'), sale_payload(farm, batch, 20), format='json'
        ).data['id']

        response = authenticated_client.patch(
            reverse('sales:sale-detail', args=[sale_id]), {'quantity': 50}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['total_amount']) == Decimal('2250.00')
        batch.refresh_from_db()
        assert batch.current_quantity == 50

        authenticated_client.patch(reverse('sales:sale-detail', args=[sale_id]), {'quantity': 10}, format='json')
        batch.refresh_from_db()
        assert batch.current_quantity == 90

    def test_update_past_available_stock_is_rejected(self, authenticated_client, farm, batch):
        sale_id = authenticated_client.post(
            reverse('sales:sale-list'), sale_payload(farm, batch, 20), format='json'
        ).data['id']

        response = authenticated_client.patch(
            reverse('sales:sale-detail', args=[sale_id]), {'quantity': 120}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Insufficient stock in batch. Available: 100, Requested: 120'}
        batch.refresh_from_db()
        assert batch.current_quantity == 80

    def test_egg_sales_leave_flock_size_alone(self, authenticated_client, farm, batch):
        response = authenticated_client.post(
            reverse('sales:sale-list'),
            sale_payload(farm, batch, 500, livestock_type='eggs', unit_type='piece', unit_price='1.50'),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        batch.refresh_from_db()
        assert batch.current_quantity == 100

    def test_sale_without_batch(self, authenticated_client, farm):
        response = authenticated_client.post(reverse('sales:sale-list'), {
            'farm': str(farm.id),
            'livestock_type': 'cattle',
            'quantity': 2,
            'unit_price': '3000.00',
            'date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['batch'] is None

    def test_zero_quantity_is_rejected(self, authenticated_client, farm, batch):
        response = authenticated_client.post(reverse('sales:sale-list'), sale_payload(farm, batch, 0), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['quantity'] == ['Quantity must be greater than 0']


class TestSalesSummaryAndCustomers:

    def test_summary_groups_by_type(self, authenticated_client, farm, batch):
        authenticated_client.post(reverse('sales:sale-list'), sale_payload(farm, batch, 10), format='json')
        authenticated_client.post(
            reverse('sales:sale-list'),
            sale_payload(farm, batch, 60, livestock_type='eggs', unit_price='2.00'),
            format='json',
        )

        response = authenticated_client.get(reverse('sales:sales-summary'))

        assert response.data['total'] == {'count': 2, 'quantity': 70, 'revenue': 570.0}
        assert response.data['by_type']['poultry']['revenue'] == 450.0
        assert response.data['by_type']['eggs']['quantity'] == 60

    def test_top_customers_ranked_by_spend(self, authenticated_client, farm, batch):
        big = Customer.objects.create(farm=farm, name='Kejetia Traders', phone='0244000001')
        small = Customer.objects.create(farm=farm, name='Kofi Mensah', phone='0244000002')
        Customer.objects.create(farm=farm, name='No Sales Yet', phone='0244000003')
        authenticated_client.post(
            reverse('sales:sale-list'), sale_payload(farm, batch, 40, customer=str(big.id)), format='json'
        )
        authenticated_client.post(
            reverse('sales:sale-list'), sale_payload(farm, batch, 5, customer=str(small.id)), format='json'
        )

        response = authenticated_client.get(reverse('customers:customer-top'), {'limit': 2})

        assert [row['name'] for row in response.data] == ['Kejetia Traders', 'Kofi Mensah']

    def test_customer_requires_name_and_phone(self, authenticated_client, farm):
        response = authenticated_client.post(reverse('customers:customer-list'), {
            'farm': str(farm.id), 'name': '', 'phone': '',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['name'] == ['Customer name is required']
        assert response.data['phone'] == ['Phone number is required']

    def test_deleting_customer_keeps_sales(self, authenticated_client, farm, batch):
        customer = Customer.objects.create(farm=farm, name='Mama Ama', phone='0244000004')
        authenticated_client.post(
            reverse('sales:sale-list'), sale_payload(farm, batch, 5, customer=str(customer.id)), format='json'
        )

        response = authenticated_client.delete(reverse('customers:customer-detail', args=[customer.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Sale.objects.get().customer is None
