"""
User administration ViewSet.
"""
from django.db import models
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.authz.models import User
from apps.authz.permissions import IsAdmin
from apps.authz.serializers import UserProfileSerializer
from apps.core.errors import error_response
from apps.core.observability.events import log_domain_event


class UserAdminViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    User directory for administrators.

    Endpoints:
    - GET /api/v1/admin/users/ - List users
    - GET /api/v1/admin/users/{id}/ - User detail
    - POST /api/v1/admin/users/{id}/activate/
    - POST /api/v1/admin/users/{id}/deactivate/

    Query parameters for list:
    - ?q=search_term - Search by email, first_name, last_name, company_name
    - ?is_active=true|false
    - ?role=consumer|distributor|manufacturer|admin
    """
    serializer_class = UserProfileSerializer
    permission_classes = [IsAdmin]

    def get_queryset(self):
        queryset = User.objects.all()

        q = self.request.query_params.get('q')
        if q:
            queryset = queryset.filter(
                models.Q(email__icontains=q) |
                models.Q(first_name__icontains=q) |
                models.Q(last_name__icontains=q) |
                models.Q(company_name__icontains=q)
            )

        is_active = self.request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        role = self.request.query_params.get('role')
        if role:
            queryset = queryset.filter(role=role)

        return queryset.order_by('-created_at')

    def _set_active(self, request, is_active):
        user = self.get_object()
        if user.pk == request.user.pk and not is_active:
            return error_response('You cannot deactivate your own account.')

        user.is_active = is_active
        user.save(update_fields=['is_active', 'updated_at'])
        log_domain_event(
            'user.activated' if is_active else 'user.deactivated',
            entity_type='User',
            entity_id=str(user.id),
            entity_ids={'actor_user_id': str(request.user.id)},
        )
        return Response(UserProfileSerializer(user).data)

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        return self._set_active(request, True)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        return self._set_active(request, False)
