"""
Shared pytest fixtures for the farm records test suite.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def farmer(django_user_model):
    return django_user_model.objects.create_user(
        username='farmer',
        email='farmer@test.com',
        password='testpass123',
        first_name='Kwame',
        last_name='Asante',
    )


@pytest.fixture
def other_farmer(django_user_model):
    return django_user_model.objects.create_user(
        username='other_farmer',
        email='other@test.com',
        password='testpass123',
    )


@pytest.fixture
def farm(farmer):
    from farms.services import create_farm
    return create_farm(farmer, name='Sunrise Poultry', location='Tema', farm_type='poultry')


@pytest.fixture
def other_farm(other_farmer):
    from farms.services import create_farm
    return create_farm(other_farmer, name='Lakeside Fish Farm', location='Akosombo', farm_type='aquaculture')


@pytest.fixture
def authenticated_client(api_client, farmer):
    api_client.force_authenticate(user=farmer)
    return api_client


@pytest.fixture
def batch(farm):
    from livestock.models import Batch
    return Batch.objects.create(
        farm=farm,
        livestock_type='poultry',
        species='Broiler',
        breed='Cobb 500',
        batch_name='House A',
        initial_quantity=100,
        cost_per_unit=Decimal('10.00'),
        acquisition_date=date.today() - timedelta(days=21),
    )


@pytest.fixture
def other_batch(other_farm):
    from livestock.models import Batch
    return Batch.objects.create(
        farm=other_farm,
        livestock_type='fish',
        species='Tilapia',
        initial_quantity=500,
        cost_per_unit=Decimal('1.00'),
        acquisition_date=date.today() - timedelta(days=30),
    )
