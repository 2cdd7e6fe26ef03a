from django.contrib import admin

from .models import QRCode, QRCodeProduct


class QRCodeProductInline(admin.TabularInline):
    model = QRCodeProduct
    extra = 0
    raw_id_fields = ['product']


@admin.register(QRCode)
class QRCodeAdmin(admin.ModelAdmin):
    list_display = ['code', 'location', 'distributor', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['code', 'location']
    readonly_fields = ['code', 'qr_code_image_url', 'created_at', 'deactivated_at']
    inlines = [QRCodeProductInline]
