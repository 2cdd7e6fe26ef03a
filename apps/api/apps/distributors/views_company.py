"""
Company views - chain head office management of its locations.

Endpoints:
- GET    /api/v1/company/locations/
- DELETE /api/v1/company/locations/{id}/
- GET    /api/v1/company/locations/{id}/products/
- POST   /api/v1/company/locations/{id}/products/
- DELETE /api/v1/company/locations/{id}/products/{product_id}/
- GET    /api/v1/company/head-office-code/
- POST   /api/v1/company/head-office-code/regenerate/
- GET    /api/v1/company/sales/
"""
from django.core.exceptions import ValidationError
from django.db.models import Count, Q
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.errors import error_response, not_found
from apps.core.observability import get_sanitized_logger
from apps.products import services as product_services
from apps.products.models import DistributorProduct, Product
from apps.products.serializers import DistributorProductSerializer
from apps.sales import services as sales_services
from apps.sales.serializers import SaleSerializer

from . import services
from .permissions import IsHeadOffice
from .serializers import LocationSerializer, ProductIdSerializer

logger = get_sanitized_logger(__name__)


class CompanyLocationViewSet(viewsets.GenericViewSet):
    """Active locations of the head office's company."""
    serializer_class = LocationSerializer
    permission_classes = [IsHeadOffice]

    def get_queryset(self):
        return (
            self.head_office.company_locations()
            .select_related('qr_code')
            .annotate(
                active_product_count=Count(
                    'distributor_products',
                    filter=Q(distributor_products__is_active=True),
                )
            )
            .order_by('-is_headquarters', 'created_at')
        )

    def list(self, request):
        head_office = self.head_office
        locations = self.get_queryset()
        return Response({
            'company_name': head_office.company.company_name,
            'location_count': locations.count(),
            'locations': LocationSerializer(locations, many=True).data,
        })

    def destroy(self, request, pk=None):
        location = self.get_object()
        try:
            services.delete_location(self.head_office, location)
        except services.LocationError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get', 'post'])
    def products(self, request, pk=None):
        location = self.get_object()

        if request.method == 'GET':
            selections = (
                DistributorProduct.objects.filter(distributor=location, is_active=True)
                .select_related('product__manufacturer')
            )
            return Response({
                'location_id': location.id,
                'product_selection_count': location.product_selection_count,
                'selected_count': selections.count(),
                'products': DistributorProductSerializer(selections, many=True).data,
            })

        serializer = ProductIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = Product.objects.filter(pk=serializer.validated_data['product_id']).select_related('manufacturer').first()
        if product is None:
            return not_found('Product not found.')

        try:
            selection = product_services.add_distributor_product(location, product)
        except ValidationError as e:
            return error_response(e)

        return Response(DistributorProductSerializer(selection).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'products/(?P<product_id>\d+)')
    def remove_product(self, request, pk=None, product_id=None):
        location = self.get_object()
        selection = DistributorProduct.objects.filter(
            distributor=location,
            product_id=product_id,
            is_active=True,
        ).first()
        if selection is None:
            return not_found('This product is not selected at this location.')

        product_services.remove_distributor_product(selection)
        return Response(status=status.HTTP_204_NO_CONTENT)


class HeadOfficeCodeView(APIView):
    permission_classes = [IsHeadOffice]

    def get(self, request):
        company = self.head_office.company
        return Response({
            'company_name': company.company_name,
            'head_office_code': company.head_office_code,
        })


class RegenerateHeadOfficeCodeView(APIView):
    """Issue a new code; the previous one stops working immediately."""
    permission_classes = [IsHeadOffice]

    def post(self, request):
        code = services.regenerate_head_office_code(self.head_office.company)
        return Response({
            'message': 'A new head office code has been issued.',
            'head_office_code': code,
        })


class CompanySalesView(APIView):
    permission_classes = [IsHeadOffice]

    def get(self, request):
        report = sales_services.company_sales(self.head_office)
        report['recent_sales'] = SaleSerializer(report['recent_sales'], many=True).data
        return Response(report)
