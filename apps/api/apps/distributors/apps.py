"""Distributors app configuration."""
from django.apps import AppConfig


class DistributorsConfig(AppConfig):
    """Companies, shelf locations and their contracts."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.distributors'
    verbose_name = 'Distributors'
