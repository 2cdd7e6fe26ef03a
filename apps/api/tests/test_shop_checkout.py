"""
Storefront and checkout tests.

Covers:
1. Storefront shows active, in-stock assignments in display order
2. Product pages only for products offered at the location
3. Checkout: stock decrement, shipping, commission and platform fee
4. Failed checkouts leave stock and orders untouched
5. Reviews are moderated before they appear
"""
from decimal import Decimal

import pytest

from apps.core import services as system_settings
from apps.products.models import DistributorProduct, Review
from apps.qrcodes import services as qr_services
from apps.sales import services as sales_services
from apps.sales.models import Order, OrderItem, OrderStatus, Sale

from tests.factories import make_client, make_qr_code


@pytest.fixture
def storefront(qr_code, products):
    """QR code showing the first two products (cookies first)."""
    qr_services.add_qr_product(qr_code, products[0], display_order=2)
    qr_services.add_qr_product(qr_code, products[1], display_order=1)
    return qr_code


def checkout_url(qr_code):
    return f'/shop/{qr_code.code}/orders/'


def checkout_payload(*lines):
    return {
        'items': [{'product_id': p.id, 'quantity': q} for p, q in lines],
        'shipping_name': 'Hana Sato',
        'shipping_address': '1-1 Marunouchi, Tokyo',
        'shipping_phone': '090-0000-0000',
    }


@pytest.mark.django_db
class TestStorefront:

    def test_anonymous_browsing(self, api_client, storefront, products):
        response = api_client.get(f'/shop/{storefront.code}/')

        assert response.status_code == 200
        assert response.data['location'] == 'Front counter'
        names = [row['product']['name'] for row in response.data['products']]
        assert names == ['Hojicha Cookies', 'Matcha Latte Mix']

    def test_wholesale_price_not_exposed(self, api_client, storefront):
        response = api_client.get(f'/shop/{storefront.code}/')
        assert 'wholesale_price' not in response.data['products'][0]['product']

    def test_out_of_stock_and_inactive_are_hidden(self, api_client, storefront, products):
        products[0].stock_quantity = 0
        products[0].save()
        products[1].is_active = False
        products[1].save()

        response = api_client.get(f'/shop/{storefront.code}/')

        assert response.data['products'] == []

    def test_inactive_code_is_not_found(self, api_client, storefront):
        qr_services.deactivate_qr_code(storefront)

        response = api_client.get(f'/shop/{storefront.code}/')

        assert response.status_code == 404

    def test_unknown_code(self, api_client, db):
        assert api_client.get('/shop/NOPE0000/').status_code == 404


@pytest.mark.django_db
class TestProductDetail:

    def test_assigned_product(self, api_client, storefront, products):
        response = api_client.get(f'/shop/{storefront.code}/products/{products[0].id}/')

        assert response.status_code == 200
        assert response.data['product']['name'] == 'Matcha Latte Mix'
        assert response.data['average_rating'] is None
        assert response.data['review_count'] == 0

    def test_selected_product_is_offered(self, api_client, storefront, products, distributor):
        DistributorProduct.objects.create(distributor=distributor, product=products[2])

        response = api_client.get(f'/shop/{storefront.code}/products/{products[2].id}/')

        assert response.status_code == 200

    def test_product_not_sold_here(self, api_client, storefront, products):
        response = api_client.get(f'/shop/{storefront.code}/products/{products[3].id}/')
        assert response.status_code == 404

    def test_only_approved_reviews_count(self, api_client, storefront, products, consumer_user):
        Review.objects.create(product=products[0], user=consumer_user, rating=5, is_approved=True)
        Review.objects.create(product=products[0], user=consumer_user, rating=4, is_approved=True)
        Review.objects.create(product=products[0], user=consumer_user, rating=1)

        response = api_client.get(f'/shop/{storefront.code}/products/{products[0].id}/')

        assert response.data['average_rating'] == 4.5
        assert response.data['review_count'] == 2
        assert response.data['reviews'][0]['reviewer'] == 'Hana'


@pytest.mark.django_db
class TestReviews:

    def test_consumer_review_is_pending(self, consumer_client, storefront, products):
        response = consumer_client.post(
            f'/shop/{storefront.code}/products/{products[0].id}/reviews/',
            {'rating': 5, 'comment': 'Lovely'},
            format='json',
        )

        assert response.status_code == 201
        assert response.data['review']['is_approved'] is False

    def test_rating_range(self, consumer_client, storefront, products):
        response = consumer_client.post(
            f'/shop/{storefront.code}/products/{products[0].id}/reviews/',
            {'rating': 6},
            format='json',
        )
        assert response.status_code == 400

    def test_anonymous_cannot_review(self, api_client, storefront, products):
        response = api_client.post(
            f'/shop/{storefront.code}/products/{products[0].id}/reviews/',
            {'rating': 5},
            format='json',
        )
        assert response.status_code == 401


@pytest.mark.django_db
class TestCheckout:

    def test_successful_checkout(self, consumer_client, storefront, products, distributor):
        response = consumer_client.post(
            checkout_url(storefront),
            checkout_payload((products[0], 2), (products[1], 1)),
            format='json',
        )

        assert response.status_code == 201
        assert response.data['status'] == OrderStatus.PAID
        # 2 x 1000 + 1 x 500, shipping 300 per line
        assert Decimal(response.data['shipping_fee']) == Decimal('600.00')
        assert Decimal(response.data['total_amount']) == Decimal('3100.00')
        assert len(response.data['items']) == 2

        products[0].refresh_from_db()
        products[1].refresh_from_db()
        assert products[0].stock_quantity == 18
        assert products[1].stock_quantity == 19

        sale = Sale.objects.get()
        assert sale.distributor == distributor
        assert sale.qr_code == storefront
        assert sale.total_amount == Decimal('3100.00')
        assert sale.distributor_commission == Decimal('250.00')
        assert sale.platform_fee == Decimal('125.00')

    def test_free_shipping_threshold(self, consumer_user, storefront, products):
        products[0].free_shipping_threshold = Decimal('2000.00')
        products[0].save()

        order = sales_services.place_order(
            consumer_user,
            storefront,
            items=[{'product_id': products[0].id, 'quantity': 2}],
            offered_product_ids=qr_services.offered_product_ids(storefront),
        )

        assert order.shipping_fee == Decimal('0.00')
        assert order.total_amount == Decimal('2000.00')

    def test_duplicate_lines_are_merged(self, consumer_user, storefront, products):
        order = sales_services.place_order(
            consumer_user,
            storefront,
            items=[
                {'product_id': products[0].id, 'quantity': 1},
                {'product_id': products[0].id, 'quantity': 2},
            ],
            offered_product_ids=qr_services.offered_product_ids(storefront),
        )

        item = OrderItem.objects.get(order=order)
        assert item.quantity == 3
        assert item.total_price == Decimal('3000.00')

    def test_commission_rate_from_settings(self, consumer_user, storefront, products):
        system_settings.set_value('PRICING', 'DISTRIBUTOR_COMMISSION_RATE', '0.20')

        order = sales_services.place_order(
            consumer_user,
            storefront,
            items=[{'product_id': products[1].id, 'quantity': 1}],
            offered_product_ids=qr_services.offered_product_ids(storefront),
        )

        assert order.sales.get().distributor_commission == Decimal('100.00')

    def test_insufficient_stock_changes_nothing(self, consumer_client, storefront, products):
        response = consumer_client.post(
            checkout_url(storefront),
            checkout_payload((products[1], 1), (products[0], 21)),
            format='json',
        )

        assert response.status_code == 400
        assert response.data['error_type'] == 'insufficient_stock'
        assert 'only 20 left' in response.data['error']
        products[1].refresh_from_db()
        assert products[1].stock_quantity == 20
        assert not Order.objects.exists()
        assert not Sale.objects.exists()

    def test_minimum_order_quantity(self, consumer_client, storefront, products):
        products[0].minimum_order_quantity = 3
        products[0].save()

        response = consumer_client.post(
            checkout_url(storefront),
            checkout_payload((products[0], 2)),
            format='json',
        )

        assert response.status_code == 400
        assert 'minimum order quantity is 3' in response.data['error']

    def test_product_not_offered(self, consumer_client, storefront, products):
        response = consumer_client.post(
            checkout_url(storefront),
            checkout_payload((products[3], 1)),
            format='json',
        )

        assert response.status_code == 400
        assert not Order.objects.exists()

    def test_empty_order(self, consumer_client, storefront):
        payload = checkout_payload()
        response = consumer_client.post(checkout_url(storefront), payload, format='json')
        assert response.status_code == 400

    def test_inactive_code(self, consumer_client, storefront, products):
        qr_services.deactivate_qr_code(storefront)

        response = consumer_client.post(
            checkout_url(storefront),
            checkout_payload((products[0], 1)),
            format='json',
        )

        assert response.status_code == 404

    def test_only_consumers_can_order(self, distributor_client, storefront, products):
        response = distributor_client.post(
            checkout_url(storefront),
            checkout_payload((products[0], 1)),
            format='json',
        )
        assert response.status_code == 403

    def test_order_attributed_to_store_location(self, chain, products, consumer_user):
        store = chain['stores'][0]
        qr_code = make_qr_code(store)
        qr_services.add_qr_product(qr_code, products[0])
        client = make_client(consumer_user)

        response = client.post(checkout_url(qr_code), checkout_payload((products[0], 1)), format='json')

        assert response.status_code == 201
        assert Sale.objects.get().distributor == store
