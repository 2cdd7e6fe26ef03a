"""
Contract views - distributor self-service and admin oversight.

Distributor endpoints:
- GET  /api/v1/contracts/
- POST /api/v1/contracts/{id}/request-cancellation/
- POST /api/v1/contracts/{id}/confirm-shelf-return/
- POST /api/v1/contracts/{id}/extend/

Admin endpoints:
- GET  /api/v1/admin/contracts/?status=
- POST /api/v1/admin/contracts/{id}/complete-cancellation/
- POST /api/v1/admin/contracts/{id}/mark-overdue/
- GET  /api/v1/admin/distributors/ (+ activate / deactivate)
- GET  /api/v1/admin/manufacturers/
- GET  /api/v1/admin/subscriptions/
"""
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.authz.permissions import IsAdmin, IsDistributor
from apps.core.errors import error_response, forbidden
from apps.core.observability import get_sanitized_logger
from apps.products.models import Manufacturer
from apps.products.serializers import ManufacturerSerializer

from . import services
from .access import get_accessible_distributors, has_access_to_distributor
from .models import ContractStatus, Distributor, DistributorSubscription
from .serializers import DistributorSerializer, SubscriptionSerializer

logger = get_sanitized_logger(__name__)


class ContractViewSet(viewsets.ReadOnlyModelViewSet):
    """Contracts of the requesting distributor (company-wide for a head office)."""
    serializer_class = DistributorSerializer
    permission_classes = [IsDistributor]
    pagination_class = None

    def get_queryset(self):
        return get_accessible_distributors(self.request.user).order_by('created_at')

    def _transition(self, request, operation, message):
        distributor = self.get_object()
        if not has_access_to_distributor(request.user, distributor):
            return forbidden()
        try:
            distributor = operation(distributor)
        except services.ContractTransitionError as e:
            return error_response(e)
        return Response({
            'message': message,
            'contract': DistributorSerializer(distributor).data,
        })

    @action(detail=True, methods=['post'], url_path='request-cancellation')
    def request_cancellation(self, request, pk=None):
        return self._transition(
            request,
            services.request_cancellation,
            'Cancellation requested. Please return the shelf before the due date.',
        )

    @action(detail=True, methods=['post'], url_path='confirm-shelf-return')
    def confirm_shelf_return(self, request, pk=None):
        return self._transition(
            request,
            services.confirm_shelf_return,
            'Shelf return recorded. An administrator will complete the cancellation.',
        )

    @action(detail=True, methods=['post'], url_path='extend')
    def extend(self, request, pk=None):
        return self._transition(request, services.extend_contract, 'The contract has been extended.')


class AdminContractViewSet(viewsets.ReadOnlyModelViewSet):
    """Every contract, filterable by ``?status=``."""
    serializer_class = DistributorSerializer
    permission_classes = [IsAdmin]

    def get_queryset(self):
        queryset = Distributor.objects.select_related('company', 'user').order_by('-created_at')
        contract_status = self.request.query_params.get('status')
        if contract_status:
            queryset = queryset.filter(contract_status=contract_status)
        return queryset

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        counts = {
            choice: Distributor.objects.filter(contract_status=choice).count()
            for choice in ContractStatus.values
        }
        if isinstance(response.data, dict):
            response.data['status_counts'] = counts
        else:
            response.data = {'results': response.data, 'status_counts': counts}
        return response

    @action(detail=True, methods=['post'], url_path='complete-cancellation')
    def complete_cancellation(self, request, pk=None):
        distributor = self.get_object()
        try:
            removed = services.complete_cancellation(distributor)
        except services.ContractTransitionError as e:
            return error_response(e)

        logger.info(
            'Contract cancellation completed',
            extra={'distributor_id': str(pk), 'removed_locations': removed}
        )
        return Response({
            'message': 'The contract has been cancelled and its records removed.',
            'removed_locations': removed,
        })

    @action(detail=True, methods=['post'], url_path='mark-overdue')
    def mark_overdue(self, request, pk=None):
        distributor = self.get_object()
        try:
            distributor = services.mark_overdue(distributor)
        except services.ContractTransitionError as e:
            return error_response(e)
        return Response({
            'message': 'The shelf return has been marked as overdue.',
            'contract': DistributorSerializer(distributor).data,
        })


class AdminDistributorViewSet(viewsets.ReadOnlyModelViewSet):
    """Distributor administration."""
    serializer_class = DistributorSerializer
    permission_classes = [IsAdmin]
    search_fields = ['company_name', 'location_name', 'user__email']

    def get_queryset(self):
        queryset = Distributor.objects.select_related('company', 'user')
        if self.request.query_params.get('active') == 'true':
            queryset = queryset.filter(is_active=True)
        return queryset.order_by('-contract_start_date')

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        distributor = services.set_distributor_active(self.get_object(), True)
        return Response(DistributorSerializer(distributor).data)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        distributor = services.set_distributor_active(self.get_object(), False)
        return Response(DistributorSerializer(distributor).data)


class AdminManufacturerViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ManufacturerSerializer
    permission_classes = [IsAdmin]
    search_fields = ['company_name']

    def get_queryset(self):
        return Manufacturer.objects.all().order_by('company_name')


class AdminSubscriptionViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = SubscriptionSerializer
    permission_classes = [IsAdmin]

    def get_queryset(self):
        queryset = DistributorSubscription.objects.select_related('distributor')
        subscription_status = self.request.query_params.get('status')
        if subscription_status:
            queryset = queryset.filter(status=subscription_status)
        return queryset.order_by('-billing_date')
