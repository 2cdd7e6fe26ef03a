"""Products app configuration."""
from django.apps import AppConfig


class ProductsConfig(AppConfig):
    """Manufacturer catalog and distributor shelf selections."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.products'
    verbose_name = 'Products'
