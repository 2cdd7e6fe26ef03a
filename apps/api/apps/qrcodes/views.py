"""
QR code views.

Distributor endpoints:
- GET    /api/v1/qrcodes/?location_id=
- POST   /api/v1/qrcodes/generate/
- POST   /api/v1/qrcodes/{id}/activate/
- POST   /api/v1/qrcodes/{id}/deactivate/
- DELETE /api/v1/qrcodes/{id}/
- GET    /api/v1/qrcodes/{id}/download/
- GET    /api/v1/qrcodes/{id}/products/
- POST   /api/v1/qrcodes/{id}/products/
- DELETE /api/v1/qrcodes/{id}/products/{product_id}/

Admin:
- GET /api/v1/admin/qrcodes/
"""
from django.core.exceptions import ValidationError
from django.db.models import Count, Q
from django.http import HttpResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.authz.permissions import IsAdmin, IsDistributor
from apps.core.errors import error_response, forbidden, not_found
from apps.core.observability import get_sanitized_logger
from apps.distributors.access import (
    get_accessible_distributors,
    get_target_distributor,
    has_access_to_qrcode,
)
from apps.products.models import Product

from . import services
from .models import QRCode, QRCodeProduct
from .serializers import (
    QRCodeGenerateSerializer,
    QRCodeProductCreateSerializer,
    QRCodeProductSerializer,
    QRCodeSerializer,
)

logger = get_sanitized_logger(__name__)


def _with_counts(queryset):
    return queryset.annotate(
        active_product_count=Count('qr_code_products', filter=Q(qr_code_products__is_active=True))
    )


class QRCodeViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = QRCodeSerializer
    permission_classes = [IsDistributor]
    pagination_class = None

    def get_queryset(self):
        queryset = QRCode.objects.select_related('distributor')
        if self.action == 'list':
            # Detail actions check access in get_object and answer 403
            distributors = get_accessible_distributors(self.request.user)
            location_id = self.request.query_params.get('location_id')
            if location_id:
                try:
                    distributors = distributors.filter(pk=int(location_id))
                except (TypeError, ValueError):
                    distributors = distributors.none()
            queryset = queryset.filter(distributor__in=distributors)
        return _with_counts(queryset).order_by('-created_at')

    def get_object(self):
        qr_code = super().get_object()
        if not has_access_to_qrcode(self.request.user, qr_code):
            self.permission_denied(self.request, message='You do not have access to this QR code.')
        return qr_code

    @action(detail=False, methods=['post'])
    def generate(self, request):
        serializer = QRCodeGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        distributor = get_target_distributor(request.user, data.get('location_id'))
        if distributor is None:
            return forbidden('You do not have access to this location.')

        try:
            qr_code = services.generate_qr_code(distributor, data['location'])
        except ValidationError as e:
            return error_response(e)

        return Response(QRCodeSerializer(qr_code).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        try:
            qr_code = services.activate_qr_code(self.get_object())
        except services.QRCodeStateError as e:
            return error_response(e)
        return Response(QRCodeSerializer(qr_code).data)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        qr_code = services.deactivate_qr_code(self.get_object())
        return Response(QRCodeSerializer(qr_code).data)

    def perform_destroy(self, instance):
        services.delete_qr_code(instance)

    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        qr_code = self.get_object()
        response = HttpResponse(services.qr_code_png(qr_code), content_type='image/png')
        response['Content-Disposition'] = f'attachment; filename="qrcode_{qr_code.code}.png"'
        return response

    @action(detail=True, methods=['get', 'post'])
    def products(self, request, pk=None):
        qr_code = self.get_object()

        if request.method == 'GET':
            assignments = (
                QRCodeProduct.objects.filter(qr_code=qr_code, is_active=True)
                .select_related('product__manufacturer')
                .order_by('display_order', 'assigned_at')
            )
            return Response({
                'qr_code': QRCodeSerializer(qr_code).data,
                'product_selection_count': qr_code.distributor.product_selection_count,
                'products': QRCodeProductSerializer(assignments, many=True).data,
            })

        serializer = QRCodeProductCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = Product.objects.filter(pk=data['product_id']).first()
        if product is None:
            return not_found('Product not found.')

        try:
            assignment = services.add_qr_product(
                qr_code,
                product,
                display_order=data.get('display_order', 0),
                notes=data.get('notes'),
            )
        except ValidationError as e:
            return error_response(e)

        return Response(QRCodeProductSerializer(assignment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'products/(?P<product_id>\d+)')
    def remove_product(self, request, pk=None, product_id=None):
        qr_code = self.get_object()
        assignment = QRCodeProduct.objects.filter(
            qr_code=qr_code,
            product_id=product_id,
            is_active=True,
        ).first()
        if assignment is None:
            return not_found('This product is not shown on this QR code.')

        services.remove_qr_product(assignment)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminQRCodeViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Every QR code with active/inactive totals."""
    serializer_class = QRCodeSerializer
    permission_classes = [IsAdmin]
    search_fields = ['code', 'location', 'distributor__company_name']

    def get_queryset(self):
        return _with_counts(QRCode.objects.select_related('distributor')).order_by('-created_at')

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        counts = {
            'active_count': QRCode.objects.filter(is_active=True).count(),
            'inactive_count': QRCode.objects.filter(is_active=False).count(),
        }
        if isinstance(response.data, dict):
            response.data.update(counts)
        else:
            response.data = {'results': response.data, **counts}
        return response
