"""
QR code API URLs.
"""
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import AdminQRCodeViewSet, QRCodeViewSet

router = SimpleRouter()
router.register(r'qrcodes', QRCodeViewSet, basename='qrcode')
router.register(r'admin/qrcodes', AdminQRCodeViewSet, basename='admin-qrcode')

urlpatterns = [
    path('', include(router.urls)),
]
