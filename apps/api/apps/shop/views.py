"""
Public storefront views.

- GET  /shop/{code}/                              - products shown on the QR code
- GET  /shop/{code}/products/{id}/                - product detail with reviews
- POST /shop/{code}/products/{id}/reviews/        - consumer review (moderated)
- POST /shop/{code}/orders/                       - checkout
"""
from django.db.models import Avg, Count
from django.http import Http404
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.authz.permissions import IsConsumer
from apps.core.errors import error_response, not_found
from apps.core.observability import get_sanitized_logger
from apps.products.models import Product, Review
from apps.products.serializers import ReviewCreateSerializer, ReviewSerializer
from apps.qrcodes import services as qr_services
from apps.sales import services as sales_services
from apps.sales.serializers import CheckoutSerializer, OrderSerializer

from .serializers import StorefrontItemSerializer, StorefrontProductSerializer

logger = get_sanitized_logger(__name__)


class StorefrontMixin:
    """Resolves ``code`` to an active QR code or answers 404."""

    def get_qr_code(self, code):
        qr_code = qr_services.get_active_qr_code(code)
        if qr_code is None:
            raise Http404('This QR code is not active.')
        return qr_code

    def get_offered_product(self, qr_code, product_id):
        if product_id not in qr_services.offered_product_ids(qr_code):
            raise Http404('This product is not sold here.')
        product = (
            Product.objects.select_related('manufacturer')
            .filter(pk=product_id, is_active=True)
            .first()
        )
        if product is None:
            raise Http404('This product is not sold here.')
        return product


class StorefrontView(StorefrontMixin, APIView):
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'shop_browse'

    def get(self, request, code):
        qr_code = self.get_qr_code(code)
        assignments = qr_services.storefront_assignments(qr_code)
        return Response({
            'code': qr_code.code,
            'location': qr_code.location,
            'store_name': str(qr_code.distributor),
            'products': StorefrontItemSerializer(assignments, many=True).data,
        })


class ProductDetailView(StorefrontMixin, APIView):
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'shop_browse'

    def get(self, request, code, product_id):
        qr_code = self.get_qr_code(code)
        product = self.get_offered_product(qr_code, product_id)

        reviews = Review.objects.filter(product=product, is_approved=True).select_related('user')
        rating = reviews.aggregate(average=Avg('rating'), count=Count('id'))

        return Response({
            'code': qr_code.code,
            'product': StorefrontProductSerializer(product).data,
            'average_rating': round(rating['average'], 1) if rating['average'] is not None else None,
            'review_count': rating['count'],
            'reviews': ReviewSerializer(reviews[:20], many=True).data,
        })


class ReviewCreateView(StorefrontMixin, APIView):
    permission_classes = [IsConsumer]

    def post(self, request, code, product_id):
        qr_code = self.get_qr_code(code)
        product = self.get_offered_product(qr_code, product_id)

        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = Review.objects.create(
            product=product,
            user=request.user,
            rating=serializer.validated_data['rating'],
            comment=serializer.validated_data.get('comment', ''),
        )
        return Response(
            {
                'message': 'Thank you! Your review will appear once approved.',
                'review': ReviewSerializer(review).data,
            },
            status=status.HTTP_201_CREATED,
        )


class CheckoutView(StorefrontMixin, APIView):
    permission_classes = [IsConsumer]

    def post(self, request, code):
        qr_code = qr_services.get_active_qr_code(code)
        if qr_code is None:
            return not_found('This QR code is not active.')

        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order = sales_services.place_order(
                request.user,
                qr_code,
                items=data['items'],
                offered_product_ids=qr_services.offered_product_ids(qr_code),
                shipping_name=data['shipping_name'],
                shipping_address=data['shipping_address'],
                shipping_phone=data.get('shipping_phone', ''),
                payment_intent_id=data.get('payment_intent_id', ''),
            )
        except sales_services.InsufficientStockError as e:
            return error_response(e, error_type='insufficient_stock')
        except sales_services.CheckoutError as e:
            return error_response(e)

        logger.info(
            'Order placed from storefront',
            extra={'order_id': str(order.id), 'qr_code': qr_code.code}
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
