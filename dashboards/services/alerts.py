"""
Alert Service

Derives health and stock alerts for the farms a user can see:
- Sudden death: deaths in the last 24 hours above the user's percent or
  quantity threshold (critical)
- Cumulative mortality above 5% of the initial quantity (warning), or
  above 10% (critical)
- Low batch stock at or below the user's low-stock percent (warning), or at
  or below half of it (critical)
- Feed inventory at or below its minimum threshold (warning)
- Overdue vaccinations (critical) and doses due within 7 days (info)
- Feed conversion ratio more than 20% above the species target (warning), or
  more than 40% above it (critical)
- Latest water reading with pH outside 6.0-8.5 (warning) or ammonia above
  2.0 mg/L (critical)

Thresholds come from the requesting user's UserSettings. Only active
batches with animals left are checked.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional
import logging

from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce

from accounts.models import UserSettings
from feed_inventory.models import FeedInventory, FeedRecord
from livestock.models import Batch, WaterQualityRecord, WeightSample
from medication_management.models import VaccinationRecord

logger = logging.getLogger(__name__)


ALERT_CRITICAL = 'critical'
ALERT_WARNING = 'warning'
ALERT_INFO = 'info'

ALERT_PRIORITY = {ALERT_CRITICAL: 0, ALERT_WARNING: 1, ALERT_INFO: 2}

CUMULATIVE_WARNING_RATE = 0.05
CUMULATIVE_CRITICAL_RATE = 0.10
VACCINATION_LOOKAHEAD_DAYS = 7

DEFAULT_TARGET_FCR = 1.8
CATFISH_TARGET_FCR = 1.5
FCR_WARNING_FACTOR = 1.2
FCR_CRITICAL_FACTOR = 1.4

PH_MIN = 6.0
PH_MAX = 8.5
AMMONIA_MAX_MG_L = 2.0


def build_alert(alert_id, alert_type, source, message, batch=None, farm_id=None, value=None, **metadata) -> Dict:
    if farm_id is None and batch is not None:
        farm_id = batch.farm_id
    return {
        'id': alert_id,
        'type': alert_type,
        'source': source,
        'message': message,
        'batch_id': str(batch.id) if batch is not None else None,
        'species': batch.species if batch is not None else None,
        'farm_id': str(farm_id) if farm_id is not None else None,
        'value': value,
        'metadata': metadata,
    }


# =============================================================================
# ALERT RULES
# =============================================================================

def check_sudden_death(batch, deaths_24h: int, alert_percent: int, alert_quantity: int) -> Optional[Dict]:
    """Critical when the last day's deaths exceed the percent or quantity threshold."""
    daily_rate = deaths_24h / batch.current_quantity if batch.current_quantity > 0 else 0
    if daily_rate > alert_percent / 100 or deaths_24h > alert_quantity:
        return build_alert(
            f'mortality-sudden-{batch.id}', ALERT_CRITICAL, 'mortality',
            f'Sudden Death: {deaths_24h} deaths in 24h ({daily_rate * 100:.1f}%)',
            batch=batch, value=round(daily_rate * 100, 1),
        )
    return None


def check_cumulative_mortality(batch, total_deaths: int) -> Optional[Dict]:
    total_rate = total_deaths / batch.initial_quantity if batch.initial_quantity > 0 else 0
    if total_rate > CUMULATIVE_WARNING_RATE:
        return build_alert(
            f'mortality-total-{batch.id}',
            ALERT_CRITICAL if total_rate > CUMULATIVE_CRITICAL_RATE else ALERT_WARNING,
            'mortality',
            f'High Cumulative Mortality: {total_rate * 100:.1f}%',
            batch=batch, value=round(total_rate * 100, 1),
        )
    return None


def is_low_stock(current_quantity: int, initial_quantity: int, threshold_percent: int) -> bool:
    """True when the remaining quantity is at or below ``threshold_percent`` of the initial one."""
    return current_quantity <= initial_quantity * threshold_percent / 100


def check_low_stock(batch, threshold_percent: int) -> Optional[Dict]:
    if batch.status != Batch.STATUS_ACTIVE:
        return None
    if not is_low_stock(batch.current_quantity, batch.initial_quantity, threshold_percent):
        return None
    remaining = batch.current_quantity / batch.initial_quantity * 100 if batch.initial_quantity > 0 else 0
    critical = is_low_stock(batch.current_quantity, batch.initial_quantity, threshold_percent / 2)
    return build_alert(
        f'low-stock-{batch.id}',
        ALERT_CRITICAL if critical else ALERT_WARNING,
        'inventory',
        f'Low Stock: {remaining:.1f}% remaining',
        batch=batch, value=round(remaining, 1),
    )


def get_target_fcr(species: str) -> float:
    return CATFISH_TARGET_FCR if 'catfish' in (species or '').lower() else DEFAULT_TARGET_FCR


def check_fcr(batch, total_feed_kg, average_weight_kg) -> Optional[Dict]:
    """
    Flag a batch whose feed per kg of live weight runs above the species target.

    Live weight is the latest average weight times the current quantity.
    """
    total_feed_kg = float(total_feed_kg or 0)
    average_weight_kg = float(average_weight_kg or 0)
    if total_feed_kg <= 0 or average_weight_kg <= 0 or batch.current_quantity <= 0:
        return None

    fcr = total_feed_kg / (average_weight_kg * batch.current_quantity)
    target = get_target_fcr(batch.species)
    if fcr <= target * FCR_WARNING_FACTOR:
        return None
    return build_alert(
        f'fcr-high-{batch.id}',
        ALERT_CRITICAL if fcr > target * FCR_CRITICAL_FACTOR else ALERT_WARNING,
        'feed',
        f'High FCR: {fcr:.2f} (target: {target})',
        batch=batch, value=round(fcr, 2),
        target_fcr=target, actual_fcr=round(fcr, 2),
    )


def check_water_quality(batch, reading) -> List[Dict]:
    """pH and ammonia alerts for a batch's latest water reading."""
    alerts = []
    ph = float(reading.ph)
    ammonia = float(reading.ammonia_mg_l)
    if ph < PH_MIN or ph > PH_MAX:
        alerts.append(build_alert(
            f'ph-{reading.id}', ALERT_WARNING, 'water_quality',
            f'Abnormal pH Level: {ph:.1f}',
            batch=batch, value=ph, date=reading.date.isoformat(),
        ))
    if ammonia > AMMONIA_MAX_MG_L:
        alerts.append(build_alert(
            f'ammonia-{reading.id}', ALERT_CRITICAL, 'water_quality',
            f'Dangerous Ammonia: {ammonia:.2f} mg/L',
            batch=batch, value=ammonia, date=reading.date.isoformat(),
        ))
    return alerts


def check_feed_inventory(inventory) -> Optional[Dict]:
    if not inventory.is_low_stock:
        return None
    return build_alert(
        f'feed-low-{inventory.id}', ALERT_WARNING, 'feed',
        f'Low Feed: {inventory.get_feed_type_display()} at {inventory.quantity_kg}kg',
        farm_id=inventory.farm_id, value=float(inventory.quantity_kg),
        min_threshold_kg=float(inventory.min_threshold_kg),
    )


def check_vaccination(batch, vaccination, today: date) -> Optional[Dict]:
    due = vaccination.next_due_date
    if due is None:
        return None
    if due < today:
        return build_alert(
            f'vax-overdue-{vaccination.id}', ALERT_CRITICAL, 'vaccination',
            f'Overdue Vaccine: {vaccination.vaccine_name}',
            batch=batch, vaccine_name=vaccination.vaccine_name, due_date=due.isoformat(),
        )
    if due <= today + timedelta(days=VACCINATION_LOOKAHEAD_DAYS):
        return build_alert(
            f'vax-upcoming-{vaccination.id}', ALERT_INFO, 'vaccination',
            f'Upcoming Vaccine: {vaccination.vaccine_name}',
            batch=batch, vaccine_name=vaccination.vaccine_name, due_date=due.isoformat(),
        )
    return None


def sort_alerts(alerts: Iterable[Dict]) -> List[Dict]:
    """Critical first, then warning, then info."""
    return sorted(alerts, key=lambda alert: ALERT_PRIORITY[alert['type']])


def count_alerts(alerts: Iterable[Dict]) -> Dict:
    counts = {ALERT_CRITICAL: 0, ALERT_WARNING: 0, ALERT_INFO: 0}
    for alert in alerts:
        counts[alert['type']] += 1
    counts['total'] = sum(counts.values())
    return counts


# =============================================================================
# SERVICE
# =============================================================================

class AlertService:
    """Service for alert data scoped to one user's thresholds"""

    def __init__(self, user):
        self.user = user
        self.settings = UserSettings.for_user(user)

    def get_alert_batches(self, farm_ids, today: date):
        since = today - timedelta(days=1)
        return Batch.objects.filter(
            farm_id__in=farm_ids,
            status=Batch.STATUS_ACTIVE,
            current_quantity__gt=0,
        ).annotate(
            total_deaths=Coalesce(Sum('mortality_records__quantity'), 0),
            recent_deaths=Coalesce(
                Sum('mortality_records__quantity', filter=Q(mortality_records__date__gte=since)), 0
            ),
        )

    def get_alerts(self, farm_ids, today: Optional[date] = None) -> List[Dict]:
        """
        All alerts for the given farms, sorted by severity.

        Args:
            farm_ids: farms to check; callers pass only farms the user can access
            today: reference date, defaults to the current date
        """
        today = today or date.today()
        settings = self.settings
        alerts = []

        batches = {batch.id: batch for batch in self.get_alert_batches(farm_ids, today)}
        for batch in batches.values():
            alerts.extend(filter(None, [
                check_sudden_death(
                    batch, batch.recent_deaths,
                    settings.mortality_alert_percent, settings.mortality_alert_quantity,
                ),
                check_cumulative_mortality(batch, batch.total_deaths),
                check_low_stock(batch, settings.low_stock_threshold_percent),
            ]))

        feed_totals = dict(
            FeedRecord.objects.filter(batch_id__in=batches.keys())
            .values('batch_id').annotate(total=Sum('quantity_kg')).order_by()
            .values_list('batch_id', 'total')
        )
        latest_weights = {}
        for sample in WeightSample.objects.filter(batch_id__in=batches.keys()).order_by('batch_id', '-date', '-created_at'):
            latest_weights.setdefault(sample.batch_id, sample.average_weight_kg)
        for batch_id, average_weight in latest_weights.items():
            alert = check_fcr(batches[batch_id], feed_totals.get(batch_id), average_weight)
            if alert:
                alerts.append(alert)

        latest_readings = {}
        for reading in WaterQualityRecord.objects.filter(batch_id__in=batches.keys()).order_by('batch_id', '-date', '-created_at'):
            latest_readings.setdefault(reading.batch_id, reading)
        for batch_id, reading in latest_readings.items():
            alerts.extend(check_water_quality(batches[batch_id], reading))

        vaccinations = VaccinationRecord.objects.filter(
            batch_id__in=batches.keys(),
            next_due_date__isnull=False,
            next_due_date__lte=today + timedelta(days=VACCINATION_LOOKAHEAD_DAYS),
        )
        for vaccination in vaccinations:
            alert = check_vaccination(batches[vaccination.batch_id], vaccination, today)
            if alert:
                alerts.append(alert)

        low_feed = FeedInventory.objects.filter(
            farm_id__in=farm_ids,
            quantity_kg__lte=F('min_threshold_kg'),
        )
        alerts.extend(filter(None, (check_feed_inventory(inventory) for inventory in low_feed)))

        alerts = sort_alerts(alerts)
        if alerts:
            logger.debug(f"Built {len(alerts)} alerts for user {self.user.id} across {len(farm_ids)} farms")
        return alerts

    def get_alerts_with_counts(self, farm_ids) -> Dict:
        alerts = self.get_alerts(farm_ids)
        return {'alerts': alerts, 'counts': count_alerts(alerts)}
