"""
API exceptions and the DRF exception handler.

Error bodies follow one convention across the API:
- field validation failures keep DRF's ``{field: [messages]}`` shape
- every other failure is ``{"error": "<message>"}``
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class FarmAccessDenied(exceptions.PermissionDenied):
    """Raised when a user reaches for a farm they cannot read or modify."""
    default_detail = 'Access denied to this farm'
    default_code = 'access_denied'


class RateLimitExceeded(exceptions.APIException):
    """Rate limit exceeded exception"""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = 'Too many requests. Please try again later.'
    default_code = 'rate_limit_exceeded'

    def __init__(self, retry_after, detail=None):
        super().__init__(detail)
        self.retry_after = int(retry_after)


class BusinessRuleError(Exception):
    """Base class for domain rule violations reported verbatim to the client."""
    pass


def api_exception_handler(exc, context):
    """
    Normalize errors to the API's error body convention.

    Django ValidationErrors raised from ``Model.clean()`` outside a serializer
    are converted to DRF validation errors, and BusinessRuleErrors become 400s.
    """
    if isinstance(exc, BusinessRuleError):
        logger.warning(f"Rejected request: {exc}")
        return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'error_dict'):
            exc = exceptions.ValidationError(exc.message_dict)
        else:
            return Response({'error': exc.messages[0]}, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(response.data, dict) and set(response.data) == {'detail'}:
        response.data = {'error': response.data['detail']}

    if isinstance(exc, RateLimitExceeded):
        response.data['retry_after'] = exc.retry_after
        response['Retry-After'] = str(exc.retry_after)

    return response
