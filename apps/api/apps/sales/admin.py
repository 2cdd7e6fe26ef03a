from django.contrib import admin

from .models import Order, OrderItem, OrderStatus, Sale, SampleOrder, Settlement


class OrderItemInline(admin.TabularInline):
    """
    Order lines; frozen once the order has been paid.
    """
    model = OrderItem
    extra = 0
    fields = ['product', 'quantity', 'unit_price', 'total_price']
    raw_id_fields = ['product']

    def has_add_permission(self, request, obj=None):
        if obj and obj.status != OrderStatus.PENDING:
            return False
        return super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        if obj and obj.status != OrderStatus.PENDING:
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status != OrderStatus.PENDING:
            return False
        return super().has_delete_permission(request, obj)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'user', 'distributor', 'status', 'total_amount', 'created_at']
    list_filter = ['status']
    search_fields = ['order_number', 'user__email', 'tracking_number']
    readonly_fields = ['order_number', 'created_at', 'updated_at']
    raw_id_fields = ['user', 'distributor']
    inlines = [OrderItemInline]


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'distributor', 'total_amount', 'distributor_commission', 'platform_fee', 'sale_date', 'is_settled']
    list_filter = ['is_settled']
    raw_id_fields = ['order', 'distributor', 'qr_code']


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    list_display = ['settlement_type', 'manufacturer', 'distributor', 'amount', 'status', 'period_start', 'period_end']
    list_filter = ['settlement_type', 'status']
    raw_id_fields = ['manufacturer', 'distributor']


@admin.register(SampleOrder)
class SampleOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'distributor', 'product', 'order_type', 'status', 'total_amount', 'order_date']
    list_filter = ['order_type', 'status']
    raw_id_fields = ['distributor', 'product']
    readonly_fields = ['total_amount']
