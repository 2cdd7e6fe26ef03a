"""Distributor serializers."""
from rest_framework import serializers

from .models import Company, Distributor, DistributorSubscription


class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = [
            'id',
            'company_name',
            'headquarters_address',
            'phone',
            'email',
            'company_type',
            'is_active',
            'created_at',
        ]
        read_only_fields = fields


class DistributorSerializer(serializers.ModelSerializer):
    """Location with its contract state."""
    contract_maturity_date = serializers.ReadOnlyField()
    can_cancel_contract = serializers.ReadOnlyField()
    effective_shelf_count = serializers.ReadOnlyField()
    effective_product_selection_count = serializers.ReadOnlyField()
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Distributor
        fields = [
            'id',
            'user',
            'user_email',
            'company',
            'company_name',
            'location_name',
            'address',
            'phone',
            'is_headquarters',
            'distributor_type',
            'parent_distributor',
            'shelf_count',
            'product_selection_count',
            'monthly_fee',
            'contract_start_date',
            'contract_end_date',
            'contract_maturity_date',
            'cancellation_request_date',
            'shelf_return_due_date',
            'shelf_returned_date',
            'shelf_return_status',
            'contract_status',
            'can_cancel_contract',
            'effective_shelf_count',
            'effective_product_selection_count',
            'is_active',
            'created_at',
        ]
        read_only_fields = fields


class LocationSerializer(serializers.ModelSerializer):
    """Compact location row for head office listings."""
    active_product_count = serializers.IntegerField(read_only=True, default=0)
    has_qr_code = serializers.SerializerMethodField()

    class Meta:
        model = Distributor
        fields = [
            'id',
            'location_name',
            'address',
            'phone',
            'distributor_type',
            'contract_status',
            'product_selection_count',
            'active_product_count',
            'has_qr_code',
        ]
        read_only_fields = fields

    def get_has_qr_code(self, obj):
        return hasattr(obj, 'qr_code')


class SubscriptionSerializer(serializers.ModelSerializer):
    distributor_name = serializers.StringRelatedField(source='distributor')

    class Meta:
        model = DistributorSubscription
        fields = [
            'id',
            'distributor',
            'distributor_name',
            'amount',
            'billing_date',
            'paid_date',
            'status',
            'failure_reason',
            'created_at',
        ]
        read_only_fields = fields


class NewContractSerializer(serializers.Serializer):
    company_name = serializers.CharField(max_length=200)
    location_name = serializers.CharField(max_length=200)
    address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    head_office_code = serializers.RegexField(
        r'^\d{8}$',
        required=False,
        allow_blank=True,
        error_messages={'invalid': 'The head office code is 8 digits.'},
    )


class LocationUpdateSerializer(serializers.Serializer):
    location_name = serializers.CharField(max_length=200, required=False)
    address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)


class ProductIdSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
