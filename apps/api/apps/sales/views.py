"""
Manufacturer order views.

- GET  /api/v1/manufacturer/orders/
- POST /api/v1/manufacturer/orders/{id}/status/
- GET  /api/v1/manufacturer/analytics/
"""
from django.shortcuts import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import IsManufacturer
from apps.core.errors import error_response, forbidden
from apps.core.observability import get_sanitized_logger
from apps.products.services import get_or_create_manufacturer

from . import services
from .models import Order
from .serializers import ManufacturerOrderSerializer, OrderSerializer, OrderStatusUpdateSerializer

logger = get_sanitized_logger(__name__)


class ManufacturerOrdersView(APIView):
    permission_classes = [IsManufacturer]

    def get(self, request):
        manufacturer = get_or_create_manufacturer(request.user)
        orders = services.manufacturer_orders(manufacturer)
        return Response({
            'count': len(orders),
            'orders': ManufacturerOrderSerializer(orders, many=True).data,
        })


class ManufacturerOrderStatusView(APIView):
    """Fulfilment updates; only for orders containing the manufacturer's products."""
    permission_classes = [IsManufacturer]

    def post(self, request, order_id):
        manufacturer = get_or_create_manufacturer(request.user)
        order = get_object_or_404(Order, pk=order_id)
        if not services.order_has_manufacturer_products(order, manufacturer):
            return forbidden('This order does not contain your products.')

        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = services.update_order_status(
                order,
                serializer.validated_data['status'],
                tracking_number=serializer.validated_data.get('tracking_number'),
            )
        except services.OrderStatusError as e:
            return error_response(e)

        logger.info(
            'Order status updated by manufacturer',
            extra={'order_id': str(order.id), 'status': order.status}
        )
        return Response(OrderSerializer(order).data)


class ManufacturerAnalyticsView(APIView):
    permission_classes = [IsManufacturer]

    def get(self, request):
        manufacturer = get_or_create_manufacturer(request.user)
        return Response(services.manufacturer_analytics(manufacturer))
