"""
Admin financial views.

- GET  /api/v1/admin/dashboard/
- GET  /api/v1/admin/analytics/
- GET  /api/v1/admin/sales/
- GET  /api/v1/admin/settlements/
- POST /api/v1/admin/settlements/{id}/process/
- GET  /api/v1/admin/sample-orders/
- GET  /api/v1/admin/reviews/?approved=false
- POST /api/v1/admin/reviews/{id}/approve/
"""
from django.shortcuts import get_object_or_404
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import IsAdmin
from apps.core.errors import error_response
from apps.products.models import Review
from apps.products.serializers import ReviewSerializer

from . import services
from .models import Settlement
from .serializers import (
    OrderSummarySerializer,
    SaleSerializer,
    SampleOrderSerializer,
    SettlementSerializer,
)


class AdminDashboardView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        dashboard = services.admin_dashboard()
        dashboard['recent_orders'] = OrderSummarySerializer(dashboard['recent_orders'], many=True).data
        return Response(dashboard)


class AdminAnalyticsView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        return Response(services.admin_analytics())


class AdminSalesView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        report = services.admin_sales()
        report['sales'] = SaleSerializer(report['sales'], many=True).data
        return Response(report)


class AdminSettlementsView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        overview = services.settlements_overview()
        overview['settlements'] = SettlementSerializer(overview['settlements'], many=True).data
        return Response(overview)


class ProcessSettlementView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request, settlement_id):
        settlement = get_object_or_404(Settlement, pk=settlement_id)
        try:
            settlement = services.process_settlement(settlement)
        except services.SettlementError as e:
            return error_response(e)
        return Response({
            'message': 'Settlement processed.',
            'settlement': SettlementSerializer(settlement).data,
        })


class AdminSampleOrdersView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        overview = services.sample_orders_overview()
        overview['sample_orders'] = SampleOrderSerializer(overview['sample_orders'], many=True).data
        return Response(overview)


class AdminReviewViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Review moderation."""
    serializer_class = ReviewSerializer
    permission_classes = [IsAdmin]

    def get_queryset(self):
        queryset = Review.objects.select_related('product', 'user').order_by('-created_at')
        approved = self.request.query_params.get('approved')
        if approved in ('true', 'false'):
            queryset = queryset.filter(is_approved=approved == 'true')
        return queryset

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        review = services.approve_review(self.get_object())
        return Response(ReviewSerializer(review).data)
