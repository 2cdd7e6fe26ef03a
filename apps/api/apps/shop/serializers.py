"""Storefront serializers."""
from rest_framework import serializers

from apps.products.models import Product


class StorefrontProductSerializer(serializers.ModelSerializer):
    """Consumer view of a product; wholesale prices stay private."""
    manufacturer_name = serializers.CharField(source='manufacturer.company_name', read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'description',
            'category',
            'image_url',
            'manufacturer_name',
            'retail_price',
            'shipping_fee',
            'free_shipping_threshold',
            'minimum_order_quantity',
            'stock_quantity',
            'requires_refrigeration',
            'requires_freezing',
        ]
        read_only_fields = fields


class StorefrontItemSerializer(serializers.Serializer):
    display_order = serializers.IntegerField()
    notes = serializers.CharField()
    product = StorefrontProductSerializer()
