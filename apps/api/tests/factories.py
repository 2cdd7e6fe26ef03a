"""
Model factories shared by the test modules.
"""
from decimal import Decimal

from rest_framework.test import APIClient

from apps.authz.models import RoleChoices, User
from apps.distributors.models import Company, CompanyType, Distributor, DistributorType
from apps.products.models import Product
from apps.qrcodes.models import QRCode

PASSWORD = 'Shelf-pass-2024'


def make_user(email, role=RoleChoices.CONSUMER, **extra):
    return User.objects.create_user(
        email=email,
        password=PASSWORD,
        role=role,
        **extra
    )


def make_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def make_distributor(user, company=None, distributor_type=DistributorType.INDIVIDUAL, **extra):
    if company is None:
        company = Company.objects.create(
            company_name=extra.get('company_name', 'Corner Shop'),
            company_type=CompanyType.INDIVIDUAL,
            owner_user=user,
        )
    defaults = {
        'company_name': company.company_name,
        'location_name': 'Main Street',
        'is_headquarters': distributor_type != DistributorType.STORE,
        'product_selection_count': 3,
    }
    defaults.update(extra)
    return Distributor.objects.create(
        user=user,
        company=company,
        distributor_type=distributor_type,
        **defaults
    )


def make_product(manufacturer, name='Matcha Latte Mix', **extra):
    defaults = {
        'category': 'Beverages',
        'wholesale_price': Decimal('600.00'),
        'retail_price': Decimal('1000.00'),
        'shipping_fee': Decimal('300.00'),
        'stock_quantity': 20,
        'minimum_order_quantity': 1,
    }
    defaults.update(extra)
    return Product.objects.create(manufacturer=manufacturer, name=name, **defaults)


def make_qr_code(distributor, location='Front counter', **extra):
    return QRCode.objects.create(distributor=distributor, location=location, **extra)

