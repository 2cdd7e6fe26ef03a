"""
Authz URLs - JWT authentication, accounts and user administration.
"""
from django.urls import include, path
from rest_framework.routers import SimpleRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from .views import CreateAdminView, MeView, RegisterView, ShelfTokenObtainPairView
from .views_users import UserAdminViewSet

router = SimpleRouter()
router.register(r'v1/admin/users', UserAdminViewSet, basename='admin-user')

urlpatterns = [
    # JWT Authentication
    path('auth/token/', ShelfTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # Accounts
    path('v1/accounts/register/', RegisterView.as_view(), name='account-register'),
    path('v1/accounts/me/', MeView.as_view(), name='account-me'),
    path('v1/accounts/admins/', CreateAdminView.as_view(), name='account-create-admin'),

    path('', include(router.urls)),
]
