"""
Chain access tests.

A head office reaches every active location of its company; stores and
individual distributors only reach themselves.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.files.storage import default_storage
from django.utils import timezone

from apps.distributors.access import (
    get_accessible_distributors,
    get_head_office_distributor,
    get_target_distributor,
    has_access_to_distributor,
)
from apps.distributors.models import Distributor
from apps.products.models import DistributorProduct
from apps.qrcodes import images
from apps.qrcodes import services as qr_services
from apps.qrcodes.models import QRCode
from apps.sales.models import Order, Sale

from tests.factories import make_client


@pytest.mark.django_db
class TestAccessRules:

    def test_head_office_reaches_company_locations(self, chain):
        accessible = get_accessible_distributors(chain['owner'])
        assert accessible.count() == 3

    def test_store_reaches_only_itself(self, chain):
        store = chain['stores'][0]
        accessible = list(get_accessible_distributors(chain['store_users'][0]))
        assert accessible == [store]

    def test_has_access(self, chain, distributor):
        head_office = chain['head_office']
        store = chain['stores'][0]

        assert has_access_to_distributor(chain['owner'], store)
        assert not has_access_to_distributor(chain['store_users'][0], head_office)
        assert not has_access_to_distributor(chain['owner'], distributor)

    def test_inactive_location_is_out_of_reach(self, chain):
        store = chain['stores'][1]
        store.is_active = False
        store.save()

        assert get_accessible_distributors(chain['owner']).count() == 2
        assert get_target_distributor(chain['owner'], store.id) is None

    def test_target_distributor(self, chain, distributor):
        owner = chain['owner']

        assert get_target_distributor(owner) == chain['head_office']
        assert get_target_distributor(owner, chain['stores'][0].id) == chain['stores'][0]
        assert get_target_distributor(owner, distributor.id) is None
        assert get_target_distributor(owner, 'abc') is None

    def test_individual_is_not_head_office(self, distributor_user, distributor):
        assert get_head_office_distributor(distributor_user) is None

    def test_effective_counts(self, chain, distributor):
        head_office = chain['head_office']

        assert head_office.effective_shelf_count == 3
        assert head_office.effective_product_selection_count == 9
        assert chain['stores'][0].effective_product_selection_count == 3
        assert distributor.effective_shelf_count == 1


@pytest.mark.django_db
class TestCompanyLocations:

    def test_list_locations(self, head_office_client, chain):
        response = head_office_client.get('/api/v1/company/locations/')

        assert response.status_code == 200
        assert response.data['company_name'] == 'Green Mart'
        assert response.data['location_count'] == 3
        assert response.data['locations'][0]['distributor_type'] == 'head_office'

    def test_store_is_refused(self, chain):
        client = make_client(chain['store_users'][0])

        response = client.get('/api/v1/company/locations/')

        assert response.status_code == 403
        assert 'head offices only' in response.data['detail']

    def test_individual_is_refused(self, distributor_client):
        response = distributor_client.get('/api/v1/company/head-office-code/')
        assert response.status_code == 403

    def test_manage_store_products(self, head_office_client, chain, products):
        store = chain['stores'][0]
        url = f'/api/v1/company/locations/{store.id}/products/'

        for product in products[:3]:
            response = head_office_client.post(url, {'product_id': product.id}, format='json')
            assert response.status_code == 201

        response = head_office_client.post(url, {'product_id': products[3].id}, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'You can select up to 3 products.'

        response = head_office_client.get(url)
        assert response.data['selected_count'] == 3

        response = head_office_client.delete(f'{url}{products[0].id}/')
        assert response.status_code == 204
        assert DistributorProduct.objects.filter(distributor=store, is_active=True).count() == 2

        response = head_office_client.delete(f'{url}{products[0].id}/')
        assert response.status_code == 404

    def test_locations_of_other_companies_are_not_found(self, head_office_client, distributor):
        response = head_office_client.get(f'/api/v1/company/locations/{distributor.id}/products/')
        assert response.status_code == 404

    def test_delete_store(self, head_office_client, chain):
        store = chain['stores'][0]

        response = head_office_client.delete(f'/api/v1/company/locations/{store.id}/')

        assert response.status_code == 204
        assert not Distributor.objects.filter(pk=store.pk).exists()

    def test_delete_store_removes_qr_images_after_commit(
        self, head_office_client, chain, django_capture_on_commit_callbacks
    ):
        store = chain['stores'][0]
        path = images.image_path(qr_services.generate_qr_code(store, 'Counter').code)
        assert default_storage.exists(path)

        with django_capture_on_commit_callbacks(execute=True):
            response = head_office_client.delete(f'/api/v1/company/locations/{store.id}/')

        assert response.status_code == 204
        assert not QRCode.objects.filter(distributor_id=store.id).exists()
        assert not default_storage.exists(path)

    def test_head_office_cannot_delete_itself(self, head_office_client, chain):
        response = head_office_client.delete(f"/api/v1/company/locations/{chain['head_office'].id}/")

        assert response.status_code == 400
        assert Distributor.objects.filter(pk=chain['head_office'].pk).exists()

    def test_store_with_sales_cannot_be_deleted(self, head_office_client, chain, consumer_user):
        store = chain['stores'][0]
        order = Order.objects.create(user=consumer_user, distributor=store, total_amount=Decimal('1000.00'))
        Sale.objects.create(
            order=order,
            distributor=store,
            total_amount=Decimal('1000.00'),
            distributor_commission=Decimal('100.00'),
            platform_fee=Decimal('50.00'),
        )

        response = head_office_client.delete(f'/api/v1/company/locations/{store.id}/')

        assert response.status_code == 400
        assert 'sales records' in response.data['error']


@pytest.mark.django_db
class TestHeadOfficeCode:

    def test_get_code(self, head_office_client):
        response = head_office_client.get('/api/v1/company/head-office-code/')

        assert response.status_code == 200
        assert response.data['head_office_code'] == '12345678'

    def test_regenerate_code(self, head_office_client, chain):
        response = head_office_client.post('/api/v1/company/head-office-code/regenerate/')

        assert response.status_code == 200
        new_code = response.data['head_office_code']
        assert new_code != '12345678'
        assert len(new_code) == 8 and new_code.isdigit()
        chain['company'].refresh_from_db()
        assert chain['company'].head_office_code == new_code


@pytest.mark.django_db
class TestCompanySales:

    def test_per_location_totals(self, head_office_client, chain, consumer_user):
        for store, amount in zip(chain['stores'], [Decimal('1000.00'), Decimal('3000.00')]):
            order = Order.objects.create(user=consumer_user, distributor=store, total_amount=amount)
            Sale.objects.create(
                order=order,
                distributor=store,
                total_amount=amount,
                distributor_commission=amount / 10,
                platform_fee=amount / 20,
            )

        response = head_office_client.get('/api/v1/company/sales/')

        assert response.status_code == 200
        assert response.data['total_sales'] == Decimal('4000.00')
        assert response.data['total_commission'] == Decimal('400.00')
        assert response.data['locations'][0]['location_name'] == 'Harbor Store'
        assert len(response.data['recent_sales']) == 2


def record_sale(consumer_user, distributor, amount, days_ago=0):
    order = Order.objects.create(user=consumer_user, distributor=distributor, total_amount=amount)
    return Sale.objects.create(
        order=order,
        distributor=distributor,
        total_amount=amount,
        distributor_commission=amount / 10,
        platform_fee=amount / 20,
        sale_date=timezone.now() - timedelta(days=days_ago),
    )


@pytest.mark.django_db
class TestLocationSales:

    def test_own_sales_newest_first(self, distributor_client, distributor, consumer_user, chain):
        older = record_sale(consumer_user, distributor, Decimal('500.00'), days_ago=3)
        newer = record_sale(consumer_user, distributor, Decimal('800.00'))
        record_sale(consumer_user, chain['stores'][0], Decimal('900.00'))

        response = distributor_client.get('/api/v1/distributor/sales/')

        assert response.status_code == 200
        assert response.data['count'] == 2
        assert [row['id'] for row in response.data['results']] == [newer.id, older.id]
        assert response.data['results'][0]['total_amount'] == '800.00'

    def test_head_office_picks_a_store(self, head_office_client, chain, consumer_user):
        store = chain['stores'][1]
        sale = record_sale(consumer_user, store, Decimal('1200.00'))
        record_sale(consumer_user, chain['stores'][0], Decimal('300.00'))

        response = head_office_client.get('/api/v1/distributor/sales/', {'location_id': store.id})

        assert response.status_code == 200
        assert [row['id'] for row in response.data['results']] == [sale.id]

    def test_store_cannot_see_sibling(self, chain):
        client = make_client(chain['store_users'][0])

        response = client.get('/api/v1/distributor/sales/', {'location_id': chain['stores'][1].id})

        assert response.status_code == 404
        assert response.data['error'] == 'No active contract found for this account.'

    def test_malformed_location_id(self, head_office_client, chain):
        response = head_office_client.get('/api/v1/distributor/sales/', {'location_id': 'abc'})
        assert response.status_code == 404

    def test_consumer_is_refused(self, consumer_client):
        assert consumer_client.get('/api/v1/distributor/sales/').status_code == 403


@pytest.mark.django_db
class TestDistributorDashboard:

    def test_current_month_figures(self, distributor_client, distributor, consumer_user):
        record_sale(consumer_user, distributor, Decimal('1000.00'))
        record_sale(consumer_user, distributor, Decimal('2000.00'))
        record_sale(consumer_user, distributor, Decimal('5000.00'), days_ago=40)

        response = distributor_client.get('/api/v1/distributor/dashboard/')

        assert response.status_code == 200
        assert response.data['distributor']['id'] == distributor.id
        assert response.data['month'] == timezone.localtime().strftime('%Y-%m')
        assert response.data['monthly_sales_count'] == 2
        assert response.data['monthly_sales'] == Decimal('3000.00')
        assert response.data['monthly_commission'] == Decimal('300.00')
        assert len(response.data['recent_sales']) == 3

    def test_empty_month(self, distributor_client, distributor):
        response = distributor_client.get('/api/v1/distributor/dashboard/')

        assert response.data['monthly_sales_count'] == 0
        assert response.data['monthly_sales'] == Decimal('0.00')
        assert response.data['recent_sales'] == []

    def test_head_office_views_store(self, head_office_client, chain, consumer_user):
        store = chain['stores'][0]
        record_sale(consumer_user, store, Decimal('700.00'))

        response = head_office_client.get('/api/v1/distributor/dashboard/', {'location_id': store.id})

        assert response.data['distributor']['id'] == store.id
        assert response.data['monthly_commission'] == Decimal('70.00')

    def test_store_cannot_view_sibling(self, chain):
        client = make_client(chain['store_users'][0])

        response = client.get('/api/v1/distributor/dashboard/', {'location_id': chain['stores'][1].id})

        assert response.status_code == 404


@pytest.mark.django_db
class TestSettlementSummary:

    def test_head_office_totals_cover_company(self, head_office_client, chain, consumer_user):
        record_sale(consumer_user, chain['stores'][0], Decimal('1000.00'))
        record_sale(consumer_user, chain['stores'][1], Decimal('3000.00'))

        response = head_office_client.get('/api/v1/distributor/settlements/')

        assert response.data['sales_count'] == 2
        assert response.data['total_commission'] == Decimal('400.00')
        assert response.data['monthly'][0]['sales_count'] == 2

    def test_store_sees_only_itself(self, chain, consumer_user):
        record_sale(consumer_user, chain['stores'][0], Decimal('1000.00'))
        record_sale(consumer_user, chain['stores'][1], Decimal('3000.00'))
        client = make_client(chain['store_users'][0])

        response = client.get('/api/v1/distributor/settlements/')

        assert response.data['total_sales'] == Decimal('1000.00')
