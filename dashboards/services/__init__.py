"""
Dashboard services module
"""

from .alerts import AlertService
from .summary import DashboardService, get_inventory_summary

__all__ = [
    'AlertService',
    'DashboardService',
    'get_inventory_summary',
]
