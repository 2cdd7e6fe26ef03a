"""
Product API URLs - catalog and manufacturer area.
"""
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import (
    CatalogCategoriesView,
    CatalogManufacturerViewSet,
    CatalogProductViewSet,
    ManufacturerProductViewSet,
    ManufacturerProfileView,
    ManufacturerStatsView,
    MyProductsViewSet,
)

router = SimpleRouter()
router.register(r'catalog/products', CatalogProductViewSet, basename='catalog-product')
router.register(r'catalog/manufacturers', CatalogManufacturerViewSet, basename='catalog-manufacturer')
router.register(r'my-products', MyProductsViewSet, basename='my-product')
router.register(r'manufacturer/products', ManufacturerProductViewSet, basename='manufacturer-product')

urlpatterns = [
    path('catalog/categories/', CatalogCategoriesView.as_view(), name='catalog-categories'),
    path('manufacturer/profile/', ManufacturerProfileView.as_view(), name='manufacturer-profile'),
    path('manufacturer/stats/', ManufacturerStatsView.as_view(), name='manufacturer-stats'),
    path('', include(router.urls)),
]
