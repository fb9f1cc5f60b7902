"""
Expenses, Suppliers and Health Records Integration Tests

SCENARIO:
=========
A farmer buys chicks and vaccines from suppliers and keeps health records:
- Expenses roll up by category
- A supplier with expenses cannot be deleted
- Vaccinations and treatments share one paginated health list
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from expenses.models import Expense
from medication_management.models import TreatmentRecord, VaccinationRecord
from procurement.models import Supplier

pytestmark = pytest.mark.django_db


@pytest.fixture
def supplier(farm):
    return Supplier.objects.create(
        farm=farm, name='VetCare Pharmacy', supplier_type='pharmacy',
        products=['Vaccines', 'Antibiotics'], phone='0244111222',
    )


# =============================================================================
# EXPENSES AND SUPPLIERS
# =============================================================================

class TestExpenses:

    def test_create_and_summarize(self, authenticated_client, farm, batch, supplier):
        for category, amount in (('medicine', '120.00'), ('medicine', '30.50'), ('labor', '500.00')):
            response = authenticated_client.post(reverse('expenses:expense-list'), {
                'farm': str(farm.id),
                'batch': str(batch.id),
                'supplier': str(supplier.id) if category == 'medicine' else None,
                'category': category,
                'amount': amount,
                'date': date.today().isoformat(),
            }, format='json')
            assert response.status_code == status.HTTP_201_CREATED

        response = authenticated_client.get(reverse('expenses:expense-summary'))

        assert response.data == {
            'total': 650.5,
            'count': 3,
            'by_category': {'medicine': 150.5, 'labor': 500.0},
        }

    def test_negative_amount_is_rejected(self, authenticated_client, farm):
        response = authenticated_client.post(reverse('expenses:expense-list'), {
            'farm': str(farm.id),
            'category': 'other',
            'amount': '-1.00',
            'date': date.today().isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['amount'] == ['Amount cannot be negative']


class TestSuppliers:

    def test_supplier_with_expenses_cannot_be_deleted(self, authenticated_client, farm, supplier):
        Expense.objects.create(farm=farm, supplier=supplier, category='medicine',
                               amount=Decimal('75.00'), date=date.today())

        response = authenticated_client.delete(reverse('suppliers:supplier-detail', args=[supplier.id]))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Cannot delete supplier with existing expenses'}
        assert Supplier.objects.filter(pk=supplier.pk).exists()

    def test_unused_supplier_can_be_deleted(self, authenticated_client, supplier):
        response = authenticated_client.delete(reverse('suppliers:supplier-detail', args=[supplier.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_detail_includes_total_spent(self, authenticated_client, farm, supplier):
        Expense.objects.create(farm=farm, supplier=supplier, category='medicine',
                               amount=Decimal('75.00'), date=date.today())
        Expense.objects.create(farm=farm, supplier=supplier, category='medicine',
                               amount=Decimal('25.00'), date=date.today())

        response = authenticated_client.get(reverse('suppliers:supplier-detail', args=[supplier.id]))

        assert response.data['total_spent'] == '100.00'
        assert len(response.data['expenses']) == 2

    def test_total_spent_without_expenses_keeps_cents(self, authenticated_client, supplier):
        response = authenticated_client.get(reverse('suppliers:supplier-detail', args=[supplier.id]))

        assert response.data['total_spent'] == '0.00'
        assert response.data['expenses'] == []

    def test_products_must_be_a_list(self, authenticated_client, farm):
        response = authenticated_client.post(reverse('suppliers:supplier-list'), {
            'farm': str(farm.id), 'name': 'Agro Feeds', 'phone': '0244333444', 'products': 'maize',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['products'] == ['Products must be a list of names']


# =============================================================================
# HEALTH RECORDS
# =============================================================================

class TestHealthRecords:

    @pytest.fixture
    def records(self, batch):
        today = date.today()
        VaccinationRecord.objects.create(
            batch=batch, vaccine_name='Newcastle', dosage='1 drop',
            date_administered=today - timedelta(days=10), next_due_date=today + timedelta(days=3),
        )
        VaccinationRecord.objects.create(
            batch=batch, vaccine_name='Gumboro', dosage='In water',
            date_administered=today - timedelta(days=20),
        )
        TreatmentRecord.objects.create(
            batch=batch, medication_name='Amprolium', reason='Coccidiosis',
            dosage='1g/L', date=today - timedelta(days=2), withdrawal_days=5,
        )

    def test_combined_list_is_sorted_newest_first(self, authenticated_client, records):
        response = authenticated_client.get(reverse('health:health-records'))

        assert response.data['total'] == 3
        assert [row['name'] for row in response.data['data']] == ['Amprolium', 'Newcastle', 'Gumboro']
        assert response.data['data'][0]['type'] == 'treatment'

    def test_type_filter(self, authenticated_client, records):
        response = authenticated_client.get(reverse('health:health-records'), {'type': 'vaccination'})

        assert response.data['total'] == 2
        assert {row['type'] for row in response.data['data']} == {'vaccination'}

    def test_invalid_type_is_rejected(self, authenticated_client, records):
        response = authenticated_client.get(reverse('health:health-records'), {'type': 'surgery'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_summary(self, authenticated_client, records):
        response = authenticated_client.get(reverse('health:health-summary'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['vaccinations']['total'] == 2
        assert response.data['vaccinations']['completed'] == 1
        assert response.data['vaccinations']['upcoming'] == 1
