"""
Distributor onboarding and settings views.

Endpoints:
- POST  /api/v1/distributor/new-contract/
- GET   /api/v1/distributor/settings/?location_id=
- PATCH /api/v1/distributor/settings/?location_id=
- POST  /api/v1/distributor/upgrade-to-chain/
- POST  /api/v1/distributor/downgrade-to-individual/
- GET   /api/v1/distributor/settlements/
- GET   /api/v1/distributor/sales/?location_id=
- GET   /api/v1/distributor/dashboard/?location_id=
"""
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import IsDistributor
from apps.core.errors import error_message, error_response, not_found
from apps.core.observability import get_sanitized_logger
from apps.sales import services as sales_services
from apps.sales.serializers import SaleSerializer

from . import services
from .access import get_head_office_distributor, get_target_distributor
from .serializers import (
    CompanySerializer,
    DistributorSerializer,
    LocationSerializer,
    LocationUpdateSerializer,
    NewContractSerializer,
)

logger = get_sanitized_logger(__name__)

NO_CONTRACT = 'No active contract found for this account.'


class NewContractView(APIView):
    """Sign up a shelf location, optionally joining a chain by head office code."""
    permission_classes = [IsDistributor]

    def post(self, request):
        serializer = NewContractSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            distributor = services.new_contract(
                request.user,
                company_name=data['company_name'],
                location_name=data['location_name'],
                address=data.get('address', ''),
                phone=data.get('phone', ''),
                head_office_code=data.get('head_office_code') or None,
            )
        except services.OnboardingError as e:
            logger.warning(
                'New contract refused',
                extra={'user_id': str(request.user.id), 'error': error_message(e)}
            )
            return error_response(e)

        return Response(DistributorSerializer(distributor).data, status=status.HTTP_201_CREATED)


class DistributorSettingsView(APIView):
    permission_classes = [IsDistributor]

    def get(self, request):
        distributor = get_target_distributor(request.user, request.query_params.get('location_id'))
        if distributor is None:
            return not_found(NO_CONTRACT)

        payload = {
            'distributor': DistributorSerializer(distributor).data,
            'company': CompanySerializer(distributor.company).data if distributor.company else None,
            'effective_shelf_count': distributor.effective_shelf_count,
            'effective_product_selection_count': distributor.effective_product_selection_count,
        }
        if get_head_office_distributor(request.user) is not None:
            payload['locations'] = LocationSerializer(distributor.company_locations(), many=True).data
        return Response(payload)

    def patch(self, request):
        distributor = get_target_distributor(request.user, request.query_params.get('location_id'))
        if distributor is None:
            return not_found(NO_CONTRACT)

        serializer = LocationUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        distributor = services.update_location_details(distributor, **serializer.validated_data)
        return Response(DistributorSerializer(distributor).data)


class UpgradeToChainView(APIView):
    permission_classes = [IsDistributor]

    def post(self, request):
        distributor = get_target_distributor(request.user)
        if distributor is None:
            return not_found(NO_CONTRACT)

        try:
            upgraded = services.upgrade_to_chain(distributor)
        except services.OnboardingError as e:
            return error_response(e)

        distributor.refresh_from_db()
        message = (
            'Your company is now a chain. Share the head office code with your stores.'
            if upgraded else
            'Your company is already registered as a chain.'
        )
        return Response({
            'message': message,
            'upgraded': upgraded,
            'head_office_code': distributor.company.head_office_code,
            'distributor': DistributorSerializer(distributor).data,
        })


class DowngradeToIndividualView(APIView):
    permission_classes = [IsDistributor]

    def post(self, request):
        distributor = get_target_distributor(request.user)
        if distributor is None:
            return not_found(NO_CONTRACT)

        try:
            distributor = services.downgrade_to_individual(distributor)
        except services.OnboardingError as e:
            return error_response(e)

        return Response({
            'message': 'Your company has switched back to an individual plan.',
            'distributor': DistributorSerializer(distributor).data,
        })


class SettlementSummaryView(APIView):
    """Sales and commission; company-wide for a head office."""
    permission_classes = [IsDistributor]

    def get(self, request):
        head_office = get_head_office_distributor(request.user)
        if head_office is not None:
            distributors = head_office.company_locations()
        else:
            distributor = get_target_distributor(request.user)
            if distributor is None:
                return not_found(NO_CONTRACT)
            distributors = [distributor]

        return Response(sales_services.settlement_summary(distributors))


class DistributorSalesView(generics.ListAPIView):
    """
    Sales of one location, newest first.

    A head office may pick any active location of its company with
    ``location_id``; everyone else only sees their own location.
    """
    serializer_class = SaleSerializer
    permission_classes = [IsDistributor]

    def list(self, request, *args, **kwargs):
        self.distributor = get_target_distributor(request.user, request.query_params.get('location_id'))
        if self.distributor is None:
            return not_found(NO_CONTRACT)
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        return sales_services.location_sales(self.distributor)


class DistributorDashboardView(APIView):
    """This month's sales and commission of a location, with its latest sales."""
    permission_classes = [IsDistributor]

    def get(self, request):
        distributor = get_target_distributor(request.user, request.query_params.get('location_id'))
        if distributor is None:
            return not_found(NO_CONTRACT)

        payload = {
            'distributor': DistributorSerializer(distributor).data,
            **sales_services.monthly_summary(distributor),
            'recent_sales': SaleSerializer(
                sales_services.location_sales(distributor)[:5],
                many=True,
            ).data,
        }
        return Response(payload)
