"""QR code serializers."""
from rest_framework import serializers

from apps.products.serializers import CatalogProductSerializer

from .images import storefront_url
from .models import QRCode, QRCodeProduct


class QRCodeSerializer(serializers.ModelSerializer):
    distributor_name = serializers.StringRelatedField(source='distributor')
    storefront_url = serializers.SerializerMethodField()
    active_product_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = QRCode
        fields = [
            'id',
            'distributor',
            'distributor_name',
            'code',
            'location',
            'qr_code_image_url',
            'storefront_url',
            'is_active',
            'active_product_count',
            'created_at',
            'deactivated_at',
        ]
        read_only_fields = fields

    def get_storefront_url(self, obj):
        return storefront_url(obj.code)


class QRCodeGenerateSerializer(serializers.Serializer):
    location = serializers.CharField(max_length=200)
    location_id = serializers.IntegerField(min_value=1, required=False)


class QRCodeProductSerializer(serializers.ModelSerializer):
    product = CatalogProductSerializer(read_only=True)

    class Meta:
        model = QRCodeProduct
        fields = ['id', 'product', 'is_active', 'display_order', 'notes', 'assigned_at', 'removed_at']
        read_only_fields = fields


class QRCodeProductCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    display_order = serializers.IntegerField(min_value=0, required=False, default=0)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)
