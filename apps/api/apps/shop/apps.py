"""Shop app configuration."""
from django.apps import AppConfig


class ShopConfig(AppConfig):
    """Public storefront reached through QR codes."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.shop'
    verbose_name = 'Shop'
