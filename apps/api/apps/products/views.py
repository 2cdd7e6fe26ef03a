"""
Product views.

Catalog (distributors):
- GET    /api/v1/catalog/products/?search=&category=&manufacturer=
- GET    /api/v1/catalog/categories/
- GET    /api/v1/catalog/manufacturers/
- GET    /api/v1/catalog/manufacturers/{id}/products/
- GET    /api/v1/my-products/?location_id=
- POST   /api/v1/my-products/
- DELETE /api/v1/my-products/{product_id}/?location_id=

Manufacturer area:
- GET/PATCH /api/v1/manufacturer/profile/
- CRUD      /api/v1/manufacturer/products/ (delete deactivates)
- POST      /api/v1/manufacturer/products/{id}/update-stock/
- GET       /api/v1/manufacturer/stats/
"""
from django.core.exceptions import ValidationError
from rest_framework import filters, generics, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import IsDistributor, IsManufacturer
from apps.core.errors import error_response, not_found
from apps.core.observability import get_sanitized_logger
from apps.distributors.access import get_target_distributor

from . import services
from .models import DistributorProduct, Product
from .serializers import (
    CatalogProductSerializer,
    DistributorProductSerializer,
    ManufacturerSerializer,
    ProductSerializer,
    SelectionCreateSerializer,
    StockUpdateSerializer,
)

logger = get_sanitized_logger(__name__)


# ============================================================================
# Catalog
# ============================================================================

class CatalogProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CatalogProductSerializer
    permission_classes = [IsDistributor]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ['name', 'retail_price', 'wholesale_price']

    def get_queryset(self):
        params = self.request.query_params
        return services.catalog_queryset(
            search=params.get('search'),
            category=params.get('category'),
            manufacturer_id=params.get('manufacturer'),
        )


class CatalogCategoriesView(APIView):
    permission_classes = [IsDistributor]

    def get(self, request):
        return Response({'categories': services.catalog_categories()})


class CatalogManufacturerViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ManufacturerSerializer
    permission_classes = [IsDistributor]
    pagination_class = None

    def get_queryset(self):
        return services.catalog_manufacturers()

    @action(detail=True, methods=['get'])
    def products(self, request, pk=None):
        manufacturer = self.get_object()
        products = services.catalog_queryset(manufacturer_id=manufacturer.id)
        return Response({
            'manufacturer': ManufacturerSerializer(manufacturer).data,
            'products': CatalogProductSerializer(products, many=True).data,
        })


class MyProductsViewSet(viewsets.ViewSet):
    """Products selected for one location's shelf."""
    permission_classes = [IsDistributor]

    def _distributor(self, request, location_id=None):
        if location_id is None:
            location_id = request.query_params.get('location_id')
        return get_target_distributor(request.user, location_id)

    def list(self, request):
        distributor = self._distributor(request)
        if distributor is None:
            return not_found('No accessible location found.')

        selections = (
            DistributorProduct.objects.filter(distributor=distributor, is_active=True)
            .select_related('product__manufacturer')
        )
        return Response({
            'location_id': distributor.id,
            'product_selection_count': distributor.product_selection_count,
            'selected_count': selections.count(),
            'products': DistributorProductSerializer(selections, many=True).data,
        })

    def create(self, request):
        serializer = SelectionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        distributor = self._distributor(request, data.get('location_id'))
        if distributor is None:
            return not_found('No accessible location found.')

        product = Product.objects.select_related('manufacturer').filter(pk=data['product_id']).first()
        if product is None:
            return not_found('Product not found.')

        try:
            selection = services.add_distributor_product(distributor, product)
        except ValidationError as e:
            return error_response(e)

        return Response(DistributorProductSerializer(selection).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        distributor = self._distributor(request)
        if distributor is None:
            return not_found('No accessible location found.')

        selection = DistributorProduct.objects.filter(
            distributor=distributor,
            product_id=pk,
            is_active=True,
        ).first()
        if selection is None:
            return not_found('This product is not selected at this location.')

        services.remove_distributor_product(selection)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Manufacturer area
# ============================================================================

class ManufacturerProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = ManufacturerSerializer
    permission_classes = [IsManufacturer]

    def get_object(self):
        return services.get_or_create_manufacturer(self.request.user)


class ManufacturerProductViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    The manufacturer's own products.

    DELETE only deactivates: order lines keep referencing the product.
    """
    serializer_class = ProductSerializer
    permission_classes = [IsManufacturer]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'category']
    ordering_fields = ['name', 'retail_price', 'stock_quantity', 'created_at']

    def get_queryset(self):
        manufacturer = services.get_or_create_manufacturer(self.request.user)
        include_inactive = self.request.query_params.get('include_inactive') == 'true' or self.action != 'list'
        return services.get_manufacturer_products(manufacturer, include_inactive=include_inactive)

    def perform_create(self, serializer):
        manufacturer = services.get_or_create_manufacturer(self.request.user)
        product = serializer.save(manufacturer=manufacturer)
        logger.info(
            'Product created',
            extra={'event': 'product.created', 'product_id': str(product.id)}
        )

    def perform_destroy(self, instance):
        services.deactivate_product(instance)

    @action(detail=True, methods=['post'], url_path='update-stock')
    def update_stock(self, request, pk=None):
        product = self.get_object()
        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            product = services.update_stock(product, serializer.validated_data['quantity'])
        except ValidationError as e:
            return error_response(e)
        return Response(ProductSerializer(product).data)


class ManufacturerStatsView(APIView):
    permission_classes = [IsManufacturer]

    def get(self, request):
        manufacturer = services.get_or_create_manufacturer(request.user)
        return Response(services.manufacturer_stats(manufacturer))
