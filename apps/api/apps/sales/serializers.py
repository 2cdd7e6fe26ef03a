"""Sales serializers."""
from rest_framework import serializers

from .models import Order, OrderItem, OrderStatus, Sale, SampleOrder, Settlement


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'product_name', 'quantity', 'unit_price', 'total_price']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    distributor_name = serializers.StringRelatedField(source='distributor')

    class Meta:
        model = Order
        fields = [
            'id',
            'order_number',
            'status',
            'distributor',
            'distributor_name',
            'total_amount',
            'shipping_fee',
            'payment_fee',
            'shipping_name',
            'shipping_address',
            'shipping_phone',
            'tracking_number',
            'items',
            'created_at',
            'shipped_at',
            'delivered_at',
            'cancelled_at',
        ]
        read_only_fields = fields


class OrderSummarySerializer(serializers.ModelSerializer):
    customer_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Order
        fields = ['id', 'order_number', 'status', 'customer_email', 'total_amount', 'created_at']
        read_only_fields = fields


class ManufacturerOrderSerializer(serializers.Serializer):
    """Order restricted to the manufacturer's own lines."""
    id = serializers.IntegerField(source='order.id')
    order_number = serializers.CharField(source='order.order_number')
    status = serializers.CharField(source='order.status')
    shipping_name = serializers.CharField(source='order.shipping_name')
    shipping_address = serializers.CharField(source='order.shipping_address')
    shipping_phone = serializers.CharField(source='order.shipping_phone')
    tracking_number = serializers.CharField(source='order.tracking_number')
    created_at = serializers.DateTimeField(source='order.created_at')
    items = OrderItemSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    tracking_number = serializers.CharField(max_length=100, required=False, allow_blank=True)


class CheckoutItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=9999)


class CheckoutSerializer(serializers.Serializer):
    items = CheckoutItemSerializer(many=True, allow_empty=False)
    shipping_name = serializers.CharField(max_length=200)
    shipping_address = serializers.CharField(max_length=500)
    shipping_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    payment_intent_id = serializers.CharField(max_length=255, required=False, allow_blank=True)


class SaleSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='order.order_number', read_only=True)
    distributor_name = serializers.StringRelatedField(source='distributor')

    class Meta:
        model = Sale
        fields = [
            'id',
            'order',
            'order_number',
            'distributor',
            'distributor_name',
            'qr_code',
            'total_amount',
            'distributor_commission',
            'platform_fee',
            'sale_date',
            'is_settled',
            'settlement_date',
        ]
        read_only_fields = fields


class SettlementSerializer(serializers.ModelSerializer):
    manufacturer_name = serializers.StringRelatedField(source='manufacturer')
    distributor_name = serializers.StringRelatedField(source='distributor')

    class Meta:
        model = Settlement
        fields = [
            'id',
            'settlement_type',
            'manufacturer',
            'manufacturer_name',
            'distributor',
            'distributor_name',
            'amount',
            'period_start',
            'period_end',
            'status',
            'processed_date',
            'notes',
            'created_at',
        ]
        read_only_fields = fields


class SampleOrderSerializer(serializers.ModelSerializer):
    distributor_name = serializers.StringRelatedField(source='distributor')
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = SampleOrder
        fields = [
            'id',
            'distributor',
            'distributor_name',
            'product',
            'product_name',
            'quantity',
            'cost',
            'shipping_fee',
            'service_fee',
            'total_amount',
            'order_type',
            'status',
            'order_date',
            'shipped_date',
            'delivered_date',
            'tracking_number',
        ]
        read_only_fields = fields
