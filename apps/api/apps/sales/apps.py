"""Sales app configuration."""
from django.apps import AppConfig


class SalesConfig(AppConfig):
    """Storefront orders, sales ledger and payouts."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.sales'
    verbose_name = 'Sales'
