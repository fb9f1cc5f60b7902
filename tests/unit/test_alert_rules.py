"""
Alert rule unit tests: thresholds, severities and ordering.
"""

import uuid
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from dashboards.services.alerts import (
    check_cumulative_mortality,
    check_fcr,
    check_low_stock,
    check_sudden_death,
    check_vaccination,
    check_water_quality,
    count_alerts,
    get_target_fcr,
    is_low_stock,
    sort_alerts,
)
from livestock.models import Batch


TODAY = date(2025, 6, 15)


def make_batch(current=100, initial=100, status=Batch.STATUS_ACTIVE, species='Broiler'):
    return SimpleNamespace(
        id=uuid.uuid4(), farm_id=uuid.uuid4(), species=species,
        current_quantity=current, initial_quantity=initial, status=status,
    )


def make_vaccination(next_due_date):
    return SimpleNamespace(id=uuid.uuid4(), vaccine_name='Newcastle', next_due_date=next_due_date)


class TestLowStock:

    @pytest.mark.parametrize('current, initial, threshold, expected', [
        (10, 100, 10, True),
        (11, 100, 10, False),
        (0, 100, 10, True),
        (50, 200, 25, True),
    ])
    def test_is_low_stock(self, current, initial, threshold, expected):
        assert is_low_stock(current, initial, threshold) is expected

    def test_warning_above_half_threshold(self):
        alert = check_low_stock(make_batch(current=8), 10)

        assert alert['type'] == 'warning'
        assert alert['source'] == 'inventory'
        assert alert['value'] == 8.0

    def test_critical_at_half_threshold(self):
        assert check_low_stock(make_batch(current=5), 10)['type'] == 'critical'

    def test_inactive_batches_are_ignored(self):
        assert check_low_stock(make_batch(current=0, status=Batch.STATUS_DEPLETED), 10) is None

    def test_healthy_stock(self):
        assert check_low_stock(make_batch(current=80), 10) is None


class TestMortality:

    def test_sudden_death_by_quantity(self):
        batch = make_batch(current=1000, initial=1000)

        alert = check_sudden_death(batch, 11, alert_percent=5, alert_quantity=10)

        assert alert['type'] == 'critical'
        assert alert['message'] == 'Sudden Death: 11 deaths in 24h (1.1%)'

    def test_sudden_death_by_percent(self):
        batch = make_batch(current=50)

        assert check_sudden_death(batch, 3, alert_percent=5, alert_quantity=10) is not None

    def test_no_sudden_death_at_thresholds(self):
        batch = make_batch(current=200)

        assert check_sudden_death(batch, 10, alert_percent=5, alert_quantity=10) is None

    @pytest.mark.parametrize('deaths, expected', [
        (5, None),
        (6, 'warning'),
        (10, 'warning'),
        (11, 'critical'),
    ])
    def test_cumulative_mortality(self, deaths, expected):
        alert = check_cumulative_mortality(make_batch(), deaths)

        assert (alert['type'] if alert else None) == expected


class TestVaccinationAlerts:

    def test_overdue_is_critical(self):
        alert = check_vaccination(make_batch(), make_vaccination(TODAY - timedelta(days=1)), TODAY)

        assert alert['type'] == 'critical'
        assert alert['metadata']['due_date'] == '2025-06-14'

    def test_due_within_a_week_is_info(self):
        alert = check_vaccination(make_batch(), make_vaccination(TODAY + timedelta(days=7)), TODAY)

        assert alert['type'] == 'info'

    def test_due_today_is_not_overdue(self):
        assert check_vaccination(make_batch(), make_vaccination(TODAY), TODAY)['type'] == 'info'

    def test_far_future_and_completed(self):
        batch = make_batch()
        assert check_vaccination(batch, make_vaccination(TODAY + timedelta(days=8)), TODAY) is None
        assert check_vaccination(batch, make_vaccination(None), TODAY) is None


class TestFeedConversion:

    def test_target_depends_on_species(self):
        assert get_target_fcr('African Catfish') == 1.5
        assert get_target_fcr('Broiler') == 1.8
        assert get_target_fcr('') == 1.8

    @pytest.mark.parametrize('feed_kg, expected', [
        (200, None),
        (240, 'warning'),
        (300, 'critical'),
    ])
    def test_severity_against_broiler_target(self, feed_kg, expected):
        alert = check_fcr(make_batch(), Decimal(feed_kg), Decimal('1.000'))

        assert (alert['type'] if alert else None) == expected

    def test_catfish_uses_lower_target(self):
        catfish = make_batch(species='Catfish')

        alert = check_fcr(catfish, Decimal('190'), Decimal('1.000'))

        assert alert['type'] == 'warning'
        assert alert['message'] == 'High FCR: 1.90 (target: 1.5)'
        assert alert['metadata'] == {'target_fcr': 1.5, 'actual_fcr': 1.9}
        assert check_fcr(make_batch(), Decimal('190'), Decimal('1.000')) is None

    def test_missing_inputs_give_no_alert(self):
        assert check_fcr(make_batch(), None, Decimal('1.000')) is None
        assert check_fcr(make_batch(), Decimal('300'), None) is None
        assert check_fcr(make_batch(current=0), Decimal('300'), Decimal('1.000')) is None


class TestWaterQualityAlerts:

    def reading(self, ph='7.00', ammonia='0.100'):
        return SimpleNamespace(id=uuid.uuid4(), date=TODAY, ph=Decimal(ph), ammonia_mg_l=Decimal(ammonia))

    def test_safe_reading(self):
        assert check_water_quality(make_batch(), self.reading()) == []

    @pytest.mark.parametrize('ph', ['5.90', '8.60'])
    def test_ph_outside_range_is_warning(self, ph):
        alerts = check_water_quality(make_batch(), self.reading(ph=ph))

        assert [a['type'] for a in alerts] == ['warning']
        assert alerts[0]['source'] == 'water_quality'

    def test_ph_at_range_edges_is_safe(self):
        assert check_water_quality(make_batch(), self.reading(ph='6.00')) == []
        assert check_water_quality(make_batch(), self.reading(ph='8.50')) == []

    def test_high_ammonia_is_critical(self):
        alerts = check_water_quality(make_batch(), self.reading(ph='9.00', ammonia='2.500'))

        assert sorted(a['type'] for a in alerts) == ['critical', 'warning']
        ammonia = next(a for a in alerts if a['type'] == 'critical')
        assert ammonia['message'] == 'Dangerous Ammonia: 2.50 mg/L'
        assert ammonia['metadata'] == {'date': '2025-06-15'}

    def test_ammonia_at_limit_is_safe(self):
        assert check_water_quality(make_batch(), self.reading(ammonia='2.000')) == []


class TestOrdering:

    def test_sort_and_count(self):
        alerts = [{'type': 'info'}, {'type': 'warning'}, {'type': 'critical'}, {'type': 'warning'}]

        assert [a['type'] for a in sort_alerts(alerts)] == ['critical', 'warning', 'warning', 'info']
        assert count_alerts(alerts) == {'critical': 1, 'warning': 2, 'info': 1, 'total': 4}

    def test_count_empty(self):
        assert count_alerts([]) == {'critical': 0, 'warning': 0, 'info': 0, 'total': 0}
