"""Product serializers."""
from rest_framework import serializers

from .models import DistributorProduct, Manufacturer, Product, Review


class ManufacturerSerializer(serializers.ModelSerializer):
    active_products = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Manufacturer
        fields = [
            'id',
            'company_name',
            'address',
            'phone',
            'company_description',
            'industry',
            'website',
            'established_year',
            'is_active',
            'active_products',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'is_active', 'active_products', 'created_at', 'updated_at']


class ProductSerializer(serializers.ModelSerializer):
    """
    Manufacturer-side product.

    Model validators enforce the price, fee and quantity ranges.
    """
    manufacturer_name = serializers.CharField(source='manufacturer.company_name', read_only=True)
    is_in_stock = serializers.ReadOnlyField()

    class Meta:
        model = Product
        fields = [
            'id',
            'manufacturer',
            'manufacturer_name',
            'name',
            'description',
            'category',
            'image_url',
            'wholesale_price',
            'retail_price',
            'free_shipping_threshold',
            'shipping_fee',
            'requires_refrigeration',
            'requires_freezing',
            'stock_quantity',
            'minimum_order_quantity',
            'is_in_stock',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'manufacturer', 'manufacturer_name', 'is_in_stock', 'created_at', 'updated_at']


class CatalogProductSerializer(serializers.ModelSerializer):
    """Product as seen by distributors browsing the catalog."""
    manufacturer_name = serializers.CharField(source='manufacturer.company_name', read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'manufacturer',
            'manufacturer_name',
            'name',
            'description',
            'category',
            'image_url',
            'wholesale_price',
            'retail_price',
            'shipping_fee',
            'requires_refrigeration',
            'requires_freezing',
            'stock_quantity',
            'minimum_order_quantity',
        ]
        read_only_fields = fields


class DistributorProductSerializer(serializers.ModelSerializer):
    product = CatalogProductSerializer(read_only=True)

    class Meta:
        model = DistributorProduct
        fields = ['id', 'distributor', 'product', 'is_active', 'assigned_at', 'removed_at']
        read_only_fields = fields


class StockUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)


class SelectionCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    location_id = serializers.IntegerField(min_value=1, required=False)


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ['id', 'product', 'reviewer', 'rating', 'comment', 'is_approved', 'approved_at', 'created_at']
        read_only_fields = ['id', 'product', 'reviewer', 'is_approved', 'approved_at', 'created_at']

    def get_reviewer(self, obj):
        return obj.user.first_name or 'Customer'


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(max_length=1000, required=False, allow_blank=True)
