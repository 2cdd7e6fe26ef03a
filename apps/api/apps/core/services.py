"""
System settings service.

Typed accessors over the SystemSetting key/value table. Parsing never
raises: a missing or malformed value yields the caller's default.
"""
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.db import transaction

from .models import SystemSetting


class SettingKeys:
    """(category, key) pairs used by the business services."""
    DEFAULT_SHELF_COUNT = ('SHELF', 'DEFAULT_SHELF_COUNT')
    DEFAULT_PRODUCT_SELECTION_COUNT = ('SHELF', 'DEFAULT_PRODUCT_SELECTION_COUNT')
    MONTHLY_FEE_INDIVIDUAL = ('PRICING', 'MONTHLY_FEE_INDIVIDUAL')
    MONTHLY_FEE_CHAIN_STORE = ('PRICING', 'MONTHLY_FEE_CHAIN_STORE')
    MONTHLY_FEE_HEAD_OFFICE = ('PRICING', 'MONTHLY_FEE_HEAD_OFFICE')
    DISTRIBUTOR_COMMISSION_RATE = ('PRICING', 'DISTRIBUTOR_COMMISSION_RATE')
    PLATFORM_FEE_RATE = ('PRICING', 'PLATFORM_FEE_RATE')
    DEFAULT_CONTRACT_DURATION_MONTHS = ('CONTRACT', 'DEFAULT_CONTRACT_DURATION_MONTHS')
    SHELF_RETURN_WINDOW_DAYS = ('CONTRACT', 'SHELF_RETURN_WINDOW_DAYS')
    SYSTEM_NAME = ('SYSTEM', 'SYSTEM_NAME')
    SYSTEM_VERSION = ('SYSTEM', 'SYSTEM_VERSION')


# Seed values written by the data migration and `seed_system_settings`
DEFAULT_SETTINGS = [
    ('SHELF', 'DEFAULT_SHELF_COUNT', '1', 'Default shelf count for a new location'),
    ('SHELF', 'DEFAULT_PRODUCT_SELECTION_COUNT', '10', 'Default product selection quota'),
    ('PRICING', 'MONTHLY_FEE_INDIVIDUAL', '5000', 'Monthly fee for individual stores'),
    ('PRICING', 'MONTHLY_FEE_CHAIN_STORE', '4000', 'Monthly fee for chain store locations'),
    ('PRICING', 'MONTHLY_FEE_HEAD_OFFICE', '6000', 'Monthly fee for chain head offices'),
    ('PRICING', 'DISTRIBUTOR_COMMISSION_RATE', '0.10', 'Share of a sale paid to the distributor'),
    ('PRICING', 'PLATFORM_FEE_RATE', '0.05', 'Share of a sale kept by the platform'),
    ('CONTRACT', 'DEFAULT_CONTRACT_DURATION_MONTHS', '12', 'Minimum contract duration'),
    ('CONTRACT', 'SHELF_RETURN_WINDOW_DAYS', '30', 'Days allowed to return the shelf after cancellation'),
    ('SYSTEM', 'SYSTEM_NAME', 'ShelfUp', 'Product name'),
    ('SYSTEM', 'SYSTEM_VERSION', '1.0.0', 'Data version'),
]


def get_setting(category: str, key: str) -> Optional[SystemSetting]:
    return SystemSetting.objects.filter(category=category, key=key).first()


def get_value(category: str, key: str) -> Optional[str]:
    setting = get_setting(category, key)
    return setting.value if setting else None


def get_int(category: str, key: str, default: int = 0) -> int:
    value = get_value(category, key)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_decimal(category: str, key: str, default: Decimal = Decimal('0')) -> Decimal:
    value = get_value(category, key)
    if value is None:
        return default
    try:
        return Decimal(value)
    except InvalidOperation:
        return default


def get_bool(category: str, key: str, default: bool = False) -> bool:
    value = get_value(category, key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in ('true', '1', 'yes', 'on'):
        return True
    if normalized in ('false', '0', 'no', 'off'):
        return False
    return default


def get_by_category(category: str) -> List[SystemSetting]:
    return list(SystemSetting.objects.filter(category=category).order_by('key'))


def exists(category: str, key: str) -> bool:
    return SystemSetting.objects.filter(category=category, key=key).exists()


@transaction.atomic
def set_value(category: str, key: str, value, description: Optional[str] = None) -> SystemSetting:
    """
    Insert or update a setting.

    Args:
        category: Setting category
        key: Setting key
        value: New value (stored as string)
        description: Replaces the description when given

    Returns:
        The saved SystemSetting
    """
    setting, created = SystemSetting.objects.select_for_update().get_or_create(
        category=category,
        key=key,
        defaults={'value': str(value), 'description': description or ''},
    )
    if not created:
        setting.value = str(value)
        if description is not None:
            setting.description = description
        setting.save(update_fields=['value', 'description', 'updated_at'])
    return setting


def seed_defaults() -> int:
    """Create default settings that are missing. Returns the number created."""
    created = 0
    for category, key, value, description in DEFAULT_SETTINGS:
        _, was_created = SystemSetting.objects.get_or_create(
            category=category,
            key=key,
            defaults={'value': value, 'description': description},
        )
        created += int(was_created)
    return created
