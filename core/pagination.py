"""
Paginated list contract shared by every farm-scoped list endpoint.

Response shape:
    {
        "data": [...],
        "total": 42,
        "page": 2,
        "page_size": 10,
        "total_pages": 5
    }

Out-of-range pages return an empty ``data`` list instead of a 404, and an
empty queryset reports ``total_pages`` of 0.
"""

import math

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def calculate_total_pages(total, page_size):
    """Number of pages needed to show ``total`` rows, 0 when there are none."""
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


class FarmListPagination(PageNumberPagination):
    """Page-number pagination that never errors on an out-of-range page."""
    page_size = settings.DEFAULT_PAGE_SIZE
    page_size_query_param = 'page_size'
    max_page_size = settings.MAX_PAGE_SIZE

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        self.page_number = _positive_int(request.query_params.get(self.page_query_param), 1)
        self.current_page_size = self.get_page_size(request)
        self.total = len(queryset) if isinstance(queryset, list) else queryset.count()

        start = (self.page_number - 1) * self.current_page_size
        return list(queryset[start:start + self.current_page_size])

    def get_paginated_response_data(self, data):
        """Return pagination metadata along with results."""
        return {
            'data': data,
            'total': self.total,
            'page': self.page_number,
            'page_size': self.current_page_size,
            'total_pages': calculate_total_pages(self.total, self.current_page_size),
        }

    def get_paginated_response(self, data):
        return Response(self.get_paginated_response_data(data))

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'data': schema,
                'total': {'type': 'integer'},
                'page': {'type': 'integer'},
                'page_size': {'type': 'integer'},
                'total_pages': {'type': 'integer'},
            },
        }

