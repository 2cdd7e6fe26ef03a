"""
Account endpoints: registration, login, profile, admin bootstrap.
"""
from django.db import transaction
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from apps.core.observability import get_sanitized_logger
from apps.core.observability.events import log_domain_event

from .models import User, RoleChoices
from .serializers import (
    AdminCreateSerializer,
    RegisterSerializer,
    ShelfTokenObtainPairSerializer,
    UserProfileSerializer,
    issue_tokens,
)

logger = get_sanitized_logger(__name__)


class RegistrationThrottle(AnonRateThrottle):
    """Limit anonymous sign-ups per IP."""
    scope = 'registration'


class ShelfTokenObtainPairView(TokenObtainPairView):
    """
    POST /api/auth/token/

    Returns access/refresh tokens plus role, display name and landing area.
    """
    serializer_class = ShelfTokenObtainPairSerializer


class RegisterView(APIView):
    """
    POST /api/v1/accounts/register/

    Self-registration for consumers, distributors and manufacturers.
    The new user is logged in immediately (tokens in the response).
    """
    permission_classes = [AllowAny]
    throttle_classes = [RegistrationThrottle]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        log_domain_event(
            'account.registered',
            entity_type='User',
            entity_id=str(user.id),
            role=user.role,
        )

        data = UserProfileSerializer(user).data
        data['tokens'] = issue_tokens(user)
        return Response(data, status=status.HTTP_201_CREATED)


class MeView(APIView):
    """GET /api/v1/accounts/me/ - current user profile."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserProfileSerializer(request.user).data)


class CreateAdminView(APIView):
    """
    POST /api/v1/accounts/admins/

    The first administrator can be created anonymously. Once an admin
    exists, only admins may create further admins.
    """
    permission_classes = [AllowAny]

    @transaction.atomic
    def post(self, request):
        admin_exists = User.objects.select_for_update().filter(role=RoleChoices.ADMIN).exists()
        caller = request.user
        caller_is_admin = bool(caller and caller.is_authenticated and caller.role == RoleChoices.ADMIN)

        if admin_exists and not caller_is_admin:
            log_domain_event(
                'account.admin_create_denied',
                entity_type='User',
                result='blocked',
            )
            return Response(
                {'error': 'Only administrators can create administrator accounts.'},
                status=status.HTTP_403_FORBIDDEN
            )

        serializer = AdminCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info(
            'Administrator account created',
            extra={
                'event': 'account.admin_created',
                'new_user_id': str(user.id),
                'bootstrap': not admin_exists,
            }
        )

        return Response(UserProfileSerializer(user).data, status=status.HTTP_201_CREATED)
