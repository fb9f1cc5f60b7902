"""
Public Formulation Views

Read-only lookup of a shared formulation by its share code (no
authentication required). Lookups are rate-limited per client IP.
"""

import logging

from django.db.models import F
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework import status

from .models import SavedFormulation
from .rate_limiting import rate_limit_shared_lookup
from .serializers import SharedFormulationSerializer

logger = logging.getLogger(__name__)


class SharedFormulationView(APIView):
    """
    Shared formulation (public - no authentication required)

    GET /api/shared/{share_code}/
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @rate_limit_shared_lookup
    def get(self, request, share_code):
        formulation = SavedFormulation.objects.filter(share_code=share_code.upper()).first()
        if formulation is None:
            return Response({'error': 'Formulation not found'}, status=status.HTTP_404_NOT_FOUND)

        SavedFormulation.objects.filter(pk=formulation.pk).update(usage_count=F('usage_count') + 1)
        return Response(SharedFormulationSerializer(formulation).data)
