from django.contrib import admin

from .models import Company, Distributor, DistributorSubscription


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['company_name', 'company_type', 'owner_user', 'is_active', 'created_at']
    list_filter = ['company_type', 'is_active']
    search_fields = ['company_name', 'email']
    readonly_fields = ['head_office_code', 'created_at', 'updated_at']


@admin.register(Distributor)
class DistributorAdmin(admin.ModelAdmin):
    list_display = [
        'company_name',
        'location_name',
        'distributor_type',
        'contract_status',
        'shelf_return_status',
        'contract_start_date',
        'is_active',
    ]
    list_filter = ['distributor_type', 'contract_status', 'shelf_return_status', 'is_active']
    search_fields = ['company_name', 'location_name', 'user__email']
    raw_id_fields = ['user', 'company', 'parent_distributor']


@admin.register(DistributorSubscription)
class DistributorSubscriptionAdmin(admin.ModelAdmin):
    list_display = ['distributor', 'amount', 'billing_date', 'status', 'paid_date']
    list_filter = ['status']
    raw_id_fields = ['distributor']
