"""
Global test fixtures for pytest.

Provides reusable fixtures for API testing:
- Authenticated API clients by role
- Distributors, chains, manufacturers, products and QR codes
"""
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from apps.authz.models import RoleChoices
from apps.distributors.models import Company, CompanyType, DistributorType
from apps.products.models import Manufacturer

from tests.factories import make_client, make_distributor, make_product, make_qr_code, make_user


# ============================================================================
# Environment
# ============================================================================

@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """QR images are written below a per-test directory."""
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    settings.SHOP_BASE_URL = 'https://shelfup.test/shop/'
    return settings.MEDIA_ROOT


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


# ============================================================================
# API Clients
# ============================================================================

@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    return make_user('admin@test.com', role=RoleChoices.ADMIN, is_staff=True)


@pytest.fixture
def admin_client(admin_user):
    return make_client(admin_user)


@pytest.fixture
def consumer_user(db):
    return make_user('consumer@test.com', first_name='Hana')


@pytest.fixture
def consumer_client(consumer_user):
    return make_client(consumer_user)


# ============================================================================
# Distributors
# ============================================================================

@pytest.fixture
def distributor_user(db):
    return make_user('store@test.com', role=RoleChoices.DISTRIBUTOR, company_name='Corner Shop')


@pytest.fixture
def distributor(distributor_user):
    """Individual store under an active contract."""
    return make_distributor(distributor_user)


@pytest.fixture
def distributor_client(distributor_user, distributor):
    return make_client(distributor_user)


@pytest.fixture
def chain(db):
    """
    Chain company with a head office and two stores.

    Returns a dict with company, head_office, stores and their users.
    """
    owner = make_user('hq@test.com', role=RoleChoices.DISTRIBUTOR, company_name='Green Mart')
    company = Company.objects.create(
        company_name='Green Mart',
        company_type=CompanyType.CHAIN,
        head_office_code='12345678',
        owner_user=owner,
    )
    head_office = make_distributor(
        owner,
        company=company,
        distributor_type=DistributorType.HEAD_OFFICE,
        location_name='Head Office',
    )
    stores = []
    store_users = []
    for index, name in enumerate(['Station Store', 'Harbor Store'], start=1):
        user = make_user(f'store{index}@greenmart.test', role=RoleChoices.DISTRIBUTOR)
        store_users.append(user)
        stores.append(make_distributor(
            user,
            company=company,
            distributor_type=DistributorType.STORE,
            location_name=name,
            parent_distributor=head_office,
        ))
    return {
        'company': company,
        'owner': owner,
        'head_office': head_office,
        'stores': stores,
        'store_users': store_users,
    }


@pytest.fixture
def head_office_client(chain):
    return make_client(chain['owner'])


# ============================================================================
# Manufacturers and products
# ============================================================================

@pytest.fixture
def manufacturer_user(db):
    return make_user('maker@test.com', role=RoleChoices.MANUFACTURER, company_name='Kyoto Tea Works')


@pytest.fixture
def manufacturer(manufacturer_user):
    return Manufacturer.objects.create(user=manufacturer_user, company_name='Kyoto Tea Works')


@pytest.fixture
def manufacturer_client(manufacturer_user, manufacturer):
    return make_client(manufacturer_user)


@pytest.fixture
def products(manufacturer):
    return [
        make_product(manufacturer, 'Matcha Latte Mix'),
        make_product(manufacturer, 'Hojicha Cookies', category='Snacks', retail_price=Decimal('500.00')),
        make_product(manufacturer, 'Sencha Tea Bags', retail_price=Decimal('800.00')),
        make_product(manufacturer, 'Genmaicha Loose Leaf', retail_price=Decimal('1200.00')),
    ]


@pytest.fixture
def qr_code(distributor):
    return make_qr_code(distributor)
