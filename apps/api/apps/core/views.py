"""
Core views - system settings administration.
"""
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.authz.permissions import IsAdmin
from apps.core.observability import get_sanitized_logger

from . import services
from .models import SystemSetting
from .serializers import SystemSettingSerializer, SystemSettingUpsertSerializer

logger = get_sanitized_logger(__name__)


class SystemSettingViewSet(viewsets.ModelViewSet):
    """
    Admin CRUD over business settings.

    Endpoints:
    - GET /api/v1/admin/settings/?category=PRICING
    - POST /api/v1/admin/settings/
    - PATCH /api/v1/admin/settings/{id}/
    - DELETE /api/v1/admin/settings/{id}/
    - PUT /api/v1/admin/settings/upsert/ - insert or update by (category, key)
    """
    serializer_class = SystemSettingSerializer
    permission_classes = [IsAdmin]
    pagination_class = None
    search_fields = ['key', 'description']
    ordering = ['category', 'key']

    def get_queryset(self):
        queryset = SystemSetting.objects.all()
        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)
        return queryset.order_by('category', 'key')

    @action(detail=False, methods=['put'], url_path='upsert')
    def upsert(self, request):
        serializer = SystemSettingUpsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        setting = services.set_value(
            data['category'],
            data['key'],
            data['value'],
            description=data.get('description'),
        )

        logger.info(
            'System setting updated',
            extra={
                'event': 'system_setting.upserted',
                'category': setting.category,
                'key': setting.key,
            }
        )
        return Response(SystemSettingSerializer(setting).data, status=status.HTTP_200_OK)
