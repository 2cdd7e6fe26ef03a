"""
Core models: system_setting
"""
from django.db import models
from django.utils.translation import gettext_lazy as _


class SettingCategory(models.TextChoices):
    """Known setting categories. Free-form categories are also accepted."""
    SHELF = 'SHELF', _('Shelf')
    PRICING = 'PRICING', _('Pricing')
    CONTRACT = 'CONTRACT', _('Contract')
    SYSTEM = 'SYSTEM', _('System')


class SystemSetting(models.Model):
    """
    Key/value store for tunable business parameters.

    Fields:
    - category: grouping (SHELF, PRICING, CONTRACT, SYSTEM, ...)
    - key: setting name, unique inside its category
    - value: raw string value, parsed by the settings service
    - description: optional human note
    - created_at, updated_at
    """
    category = models.CharField(_('Category'), max_length=50)
    key = models.CharField(_('Key'), max_length=100)
    value = models.CharField(_('Value'), max_length=500)
    description = models.CharField(_('Description'), max_length=500, blank=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)

    class Meta:
        db_table = 'system_setting'
        ordering = ['category', 'key']
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'key'],
                name='uniq_system_setting_category_key'
            ),
        ]
        verbose_name = _('System Setting')
        verbose_name_plural = _('System Settings')

    def __str__(self):
        return f"{self.category}.{self.key}={self.value}"
