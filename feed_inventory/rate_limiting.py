"""
Rate Limiting Utilities for the Shared Formulation Lookup

Limits how often one client can hit the public /api/shared/<code>/ endpoint.
"""
from datetime import timedelta
from functools import wraps
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import RateLimitExceeded
from .models import SharedLookupRateLimit

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Get client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or 'unknown'


@transaction.atomic
def check_rate_limit(identifier, max_count, window_hours):
    """
    Count one request for ``identifier`` and check it against the limit.

    Args:
        identifier: client IP address
        max_count: maximum requests allowed per window
        window_hours: window length in hours

    Returns:
        tuple: (is_allowed, retry_after_seconds)
    """
    now = timezone.now()
    window = timedelta(hours=window_hours)

    rate_limit, _ = SharedLookupRateLimit.objects.select_for_update().get_or_create(
        identifier=identifier,
        defaults={'count': 0, 'window_start': now}
    )

    # Window expired: start a new one
    if rate_limit.window_start + window <= now:
        rate_limit.count = 0
        rate_limit.window_start = now

    if rate_limit.count >= max_count:
        retry_after = (rate_limit.window_start + window - now).total_seconds()
        return False, max(1, int(retry_after))

    rate_limit.count += 1
    rate_limit.save()
    return True, 0


def rate_limit_shared_lookup(view_func):
    """
    Decorator for rate limiting the public formulation lookup per client IP.

    Limits come from SHARED_FORMULATION_RATE_LIMIT and
    SHARED_FORMULATION_RATE_WINDOW_HOURS.
    """
    @wraps(view_func)
    def wrapped_view(self, request, *args, **kwargs):
        ip = get_client_ip(request)
        allowed, retry_after = check_rate_limit(
            ip,
            settings.SHARED_FORMULATION_RATE_LIMIT,
            settings.SHARED_FORMULATION_RATE_WINDOW_HOURS,
        )
        if not allowed:
            logger.warning(f"Shared lookup rate limit hit by {ip}, retry after {retry_after}s")
            raise RateLimitExceeded(retry_after)
        return view_func(self, request, *args, **kwargs)

    return wrapped_view
