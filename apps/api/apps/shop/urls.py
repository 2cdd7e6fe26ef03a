"""
Public storefront URLs (QR code landing pages).
"""
from django.urls import path

from .views import CheckoutView, ProductDetailView, ReviewCreateView, StorefrontView

urlpatterns = [
    path('<str:code>/', StorefrontView.as_view(), name='shop-storefront'),
    path('<str:code>/products/<int:product_id>/', ProductDetailView.as_view(), name='shop-product'),
    path('<str:code>/products/<int:product_id>/reviews/', ReviewCreateView.as_view(), name='shop-review'),
    path('<str:code>/orders/', CheckoutView.as_view(), name='shop-checkout'),
]
