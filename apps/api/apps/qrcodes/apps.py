"""QR codes app configuration."""
from django.apps import AppConfig


class QRCodesConfig(AppConfig):
    """Storefront QR codes of distributor locations."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.qrcodes'
    verbose_name = 'QR Codes'
