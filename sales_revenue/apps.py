from django.apps import AppConfig


class SalesRevenueConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales_revenue"
    verbose_name = "Sales"
