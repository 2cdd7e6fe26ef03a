"""Sales URLs - manufacturer orders and admin financial views."""
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ManufacturerAnalyticsView, ManufacturerOrdersView, ManufacturerOrderStatusView
from .views_admin import (
    AdminAnalyticsView,
    AdminDashboardView,
    AdminReviewViewSet,
    AdminSalesView,
    AdminSampleOrdersView,
    AdminSettlementsView,
    ProcessSettlementView,
)

router = SimpleRouter()
router.register(r'admin/reviews', AdminReviewViewSet, basename='admin-review')

urlpatterns = [
    path('manufacturer/orders/', ManufacturerOrdersView.as_view(), name='manufacturer-orders'),
    path(
        'manufacturer/orders/<int:order_id>/status/',
        ManufacturerOrderStatusView.as_view(),
        name='manufacturer-order-status',
    ),
    path('manufacturer/analytics/', ManufacturerAnalyticsView.as_view(), name='manufacturer-analytics'),
    path('admin/dashboard/', AdminDashboardView.as_view(), name='admin-dashboard'),
    path('admin/analytics/', AdminAnalyticsView.as_view(), name='admin-analytics'),
    path('admin/sales/', AdminSalesView.as_view(), name='admin-sales'),
    path('admin/settlements/', AdminSettlementsView.as_view(), name='admin-settlements'),
    path(
        'admin/settlements/<int:settlement_id>/process/',
        ProcessSettlementView.as_view(),
        name='admin-settlement-process',
    ),
    path('admin/sample-orders/', AdminSampleOrdersView.as_view(), name='admin-sample-orders'),
    path('', include(router.urls)),
]
