"""
URL configuration for the ShelfUp API.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from apps.core.observability.health import HealthzView, ReadyzView, MetricsView

urlpatterns = [
    # Health checks (no auth required)
    path('healthz', HealthzView.as_view(), name='healthz'),
    path('readyz', ReadyzView.as_view(), name='readyz'),
    path('metrics', MetricsView.as_view(), name='metrics'),

    # Admin
    path('admin/', admin.site.urls),

    # Public storefront (QR code landing pages)
    path('shop/', include('apps.shop.urls')),

    # Private API (authentication required unless stated)
    path('api/', include('apps.authz.urls')),  # auth tokens, registration, profile
    path('api/v1/admin/', include('apps.core.urls')),  # system settings
    path('api/v1/', include('apps.distributors.urls')),  # contracts, company, settings
    path('api/v1/', include('apps.products.urls')),  # catalog, manufacturer products
    path('api/v1/', include('apps.qrcodes.urls')),  # QR codes and their products
    path('api/v1/', include('apps.sales.urls')),  # orders, settlements, dashboards

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/schema/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
