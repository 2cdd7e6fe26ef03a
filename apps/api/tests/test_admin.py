"""
Admin area tests: dashboards, financial reports, settlements, reviews,
distributor and user administration.
"""
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.distributors.models import DistributorSubscription, SubscriptionStatus
from apps.products.models import Review
from apps.qrcodes import services as qr_services
from apps.sales import services as sales_services
from apps.sales.models import (
    SampleOrder,
    SampleOrderStatus,
    Settlement,
    SettlementStatus,
    SettlementType,
)


@pytest.fixture
def order(consumer_user, qr_code, products):
    qr_services.add_qr_product(qr_code, products[0])
    return sales_services.place_order(
        consumer_user,
        qr_code,
        items=[{'product_id': products[0].id, 'quantity': 2}],
        offered_product_ids=qr_services.offered_product_ids(qr_code),
    )


@pytest.fixture
def pending_settlement(manufacturer):
    now = timezone.now()
    return Settlement.objects.create(
        manufacturer=manufacturer,
        amount=Decimal('12000.00'),
        settlement_type=SettlementType.MANUFACTURER_SALES,
        period_start=now,
        period_end=now,
    )


ADMIN_ENDPOINTS = [
    '/api/v1/admin/dashboard/',
    '/api/v1/admin/analytics/',
    '/api/v1/admin/sales/',
    '/api/v1/admin/settlements/',
    '/api/v1/admin/sample-orders/',
    '/api/v1/admin/reviews/',
    '/api/v1/admin/contracts/',
    '/api/v1/admin/distributors/',
    '/api/v1/admin/manufacturers/',
    '/api/v1/admin/subscriptions/',
    '/api/v1/admin/qrcodes/',
    '/api/v1/admin/users/',
    '/api/v1/admin/settings/',
]


@pytest.mark.django_db
class TestAdminPermissions:

    @pytest.mark.parametrize('url', ADMIN_ENDPOINTS)
    def test_admin_can_read(self, admin_client, url):
        assert admin_client.get(url).status_code == 200

    @pytest.mark.parametrize('url', ADMIN_ENDPOINTS)
    def test_distributor_is_refused(self, distributor_client, url):
        assert distributor_client.get(url).status_code == 403

    @pytest.mark.parametrize('url', ADMIN_ENDPOINTS)
    def test_anonymous_is_refused(self, api_client, url):
        assert api_client.get(url).status_code == 401


@pytest.mark.django_db
class TestFinancialViews:

    def test_dashboard(self, admin_client, order):
        response = admin_client.get('/api/v1/admin/dashboard/')

        assert response.data['active_distributors'] == 1
        assert response.data['active_manufacturers'] == 1
        assert response.data['active_products'] == 4
        # 5% of 2000
        assert response.data['monthly_platform_fee'] == Decimal('100.00')
        assert response.data['recent_orders'][0]['order_number'] == order.order_number

    def test_analytics(self, admin_client, order):
        response = admin_client.get('/api/v1/admin/analytics/')

        yearly = response.data['yearly']
        assert yearly['revenue'] == Decimal('2300.00')
        assert yearly['platform_fee'] == Decimal('100.00')
        assert yearly['commission'] == Decimal('200.00')
        assert yearly['order_count'] == 1
        assert response.data['top_products'][0]['quantity'] == 2
        assert response.data['top_distributors'][0]['revenue'] == Decimal('2300.00')

    def test_sales(self, admin_client, order):
        response = admin_client.get('/api/v1/admin/sales/')

        assert len(response.data['sales']) == 1
        assert response.data['total_commission'] == Decimal('200.00')
        assert response.data['total_platform_fee'] == Decimal('100.00')


@pytest.mark.django_db
class TestSettlements:

    def test_overview(self, admin_client, pending_settlement):
        response = admin_client.get('/api/v1/admin/settlements/')

        assert response.data['pending_total'] == Decimal('12000.00')
        assert response.data['completed_total'] == Decimal('0.00')
        assert response.data['settlements'][0]['manufacturer_name'] == 'Kyoto Tea Works'

    def test_process(self, admin_client, pending_settlement):
        url = f'/api/v1/admin/settlements/{pending_settlement.id}/process/'

        response = admin_client.post(url)
        assert response.status_code == 200
        assert response.data['settlement']['status'] == SettlementStatus.COMPLETED

        response = admin_client.post(url)
        assert response.status_code == 400
        assert response.data['error'] == 'Only pending settlements can be processed.'

    def test_unknown_settlement(self, admin_client, db):
        assert admin_client.post('/api/v1/admin/settlements/999/process/').status_code == 404


@pytest.mark.django_db
class TestSampleOrders:

    def test_service_fee_this_month(self, admin_client, distributor, products):
        SampleOrder.objects.create(
            distributor=distributor,
            product=products[0],
            cost=Decimal('600.00'),
            shipping_fee=Decimal('300.00'),
            service_fee=Decimal('200.00'),
            status=SampleOrderStatus.PAID,
        )
        SampleOrder.objects.create(
            distributor=distributor,
            product=products[1],
            service_fee=Decimal('200.00'),
        )

        response = admin_client.get('/api/v1/admin/sample-orders/')

        assert response.data['pending_count'] == 1
        assert response.data['monthly_service_fee'] == Decimal('200.00')
        assert len(response.data['sample_orders']) == 2


@pytest.mark.django_db
class TestReviewModeration:

    def test_approve(self, admin_client, consumer_user, products):
        review = Review.objects.create(product=products[0], user=consumer_user, rating=4)

        response = admin_client.get('/api/v1/admin/reviews/', {'approved': 'false'})
        assert response.data['count'] == 1

        response = admin_client.post(f'/api/v1/admin/reviews/{review.id}/approve/')
        assert response.status_code == 200
        review.refresh_from_db()
        assert review.is_approved is True
        assert review.approved_at is not None

        response = admin_client.get('/api/v1/admin/reviews/', {'approved': 'false'})
        assert response.data['count'] == 0


@pytest.mark.django_db
class TestDistributorAdministration:

    def test_deactivate_and_filter(self, admin_client, distributor, chain):
        response = admin_client.post(f'/api/v1/admin/distributors/{distributor.id}/deactivate/')
        assert response.status_code == 200
        assert response.data['is_active'] is False

        response = admin_client.get('/api/v1/admin/distributors/', {'active': 'true'})
        assert response.data['count'] == 3

        response = admin_client.post(f'/api/v1/admin/distributors/{distributor.id}/activate/')
        assert response.data['is_active'] is True

    def test_subscriptions(self, admin_client, distributor):
        DistributorSubscription.objects.create(
            distributor=distributor,
            amount=Decimal('5000.00'),
            billing_date=timezone.now(),
            status=SubscriptionStatus.FAILED,
            failure_reason='Card declined',
        )

        response = admin_client.get('/api/v1/admin/subscriptions/', {'status': SubscriptionStatus.FAILED})

        assert response.data['count'] == 1
        assert response.data['results'][0]['distributor_name'] == 'Corner Shop / Main Street'


@pytest.mark.django_db
class TestUserAdministration:

    def test_filter_by_role(self, admin_client, distributor, consumer_user):
        response = admin_client.get('/api/v1/admin/users/', {'role': 'distributor'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['email'] == 'store@test.com'

    def test_search(self, admin_client, consumer_user):
        response = admin_client.get('/api/v1/admin/users/', {'q': 'consumer@'})
        assert response.data['count'] == 1

    def test_deactivate_user(self, admin_client, consumer_user):
        response = admin_client.post(f'/api/v1/admin/users/{consumer_user.id}/deactivate/')

        assert response.status_code == 200
        consumer_user.refresh_from_db()
        assert consumer_user.is_active is False

    def test_cannot_deactivate_self(self, admin_client, admin_user):
        response = admin_client.post(f'/api/v1/admin/users/{admin_user.id}/deactivate/')

        assert response.status_code == 400
        admin_user.refresh_from_db()
        assert admin_user.is_active is True
