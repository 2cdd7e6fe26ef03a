from django.contrib import admin

from .models import DistributorProduct, Manufacturer, Product, Review


@admin.register(Manufacturer)
class ManufacturerAdmin(admin.ModelAdmin):
    list_display = ['company_name', 'industry', 'user', 'is_active', 'created_at']
    list_filter = ['is_active', 'industry']
    search_fields = ['company_name', 'user__email']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'manufacturer', 'category', 'retail_price', 'stock_quantity', 'is_active']
    list_filter = ['is_active', 'category', 'requires_refrigeration', 'requires_freezing']
    search_fields = ['name', 'manufacturer__company_name']


@admin.register(DistributorProduct)
class DistributorProductAdmin(admin.ModelAdmin):
    list_display = ['distributor', 'product', 'is_active', 'assigned_at', 'removed_at']
    list_filter = ['is_active']
    raw_id_fields = ['distributor', 'product']


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['product', 'user', 'rating', 'is_approved', 'created_at']
    list_filter = ['is_approved', 'rating']
    raw_id_fields = ['product', 'user']
