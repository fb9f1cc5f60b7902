"""
URL configuration for the farm records backend.

Every API route lives under /api/. Routes are grouped by app; apps that
expose more than one resource (livestock, feed, sales) ship one URL
module per resource.
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

from feed_inventory.public_views import SharedFormulationView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),

    # Authentication and user profile
    path('api/auth/', include('accounts.auth_urls')),
    path('api/accounts/', include('accounts.urls')),

    # Farms and livestock
    path('api/farms/', include('farms.urls')),
    path('api/batches/', include('livestock.urls')),
    path('api/mortality/', include('livestock.mortality_urls')),
    path('api/weight/', include('livestock.weight_urls')),
    path('api/eggs/', include('livestock.egg_urls')),
    path('api/water-quality/', include('livestock.water_quality_urls')),

    # Feed and formulations
    path('api/feed/', include('feed_inventory.urls')),
    path('api/formulations/', include('feed_inventory.formulation_urls')),
    path('api/shared/<str:share_code>/', SharedFormulationView.as_view(), name='shared-formulation'),  # Public (no auth)

    # Health
    path('api/health/', include('medication_management.urls')),

    # Money
    path('api/sales/', include('sales_revenue.urls')),
    path('api/customers/', include('sales_revenue.customer_urls')),
    path('api/suppliers/', include('procurement.urls')),
    path('api/expenses/', include('expenses.urls')),

    # Dashboard and reports
    path('api/dashboard/', include('dashboards.urls')),
    path('api/reports/', include('dashboards.report_urls')),
]
