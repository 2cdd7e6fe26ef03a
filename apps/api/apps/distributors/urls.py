"""
Distributor API URLs - contracts, onboarding and chain management.
"""
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views_company import (
    CompanyLocationViewSet,
    CompanySalesView,
    HeadOfficeCodeView,
    RegenerateHeadOfficeCodeView,
)
from .views_contracts import (
    AdminContractViewSet,
    AdminDistributorViewSet,
    AdminManufacturerViewSet,
    AdminSubscriptionViewSet,
    ContractViewSet,
)
from .views_settings import (
    DistributorDashboardView,
    DistributorSalesView,
    DistributorSettingsView,
    DowngradeToIndividualView,
    NewContractView,
    SettlementSummaryView,
    UpgradeToChainView,
)

router = SimpleRouter()
router.register(r'contracts', ContractViewSet, basename='contract')
router.register(r'company/locations', CompanyLocationViewSet, basename='company-location')
router.register(r'admin/contracts', AdminContractViewSet, basename='admin-contract')
router.register(r'admin/distributors', AdminDistributorViewSet, basename='admin-distributor')
router.register(r'admin/manufacturers', AdminManufacturerViewSet, basename='admin-manufacturer')
router.register(r'admin/subscriptions', AdminSubscriptionViewSet, basename='admin-subscription')

urlpatterns = [
    path('distributor/new-contract/', NewContractView.as_view(), name='distributor-new-contract'),
    path('distributor/settings/', DistributorSettingsView.as_view(), name='distributor-settings'),
    path('distributor/upgrade-to-chain/', UpgradeToChainView.as_view(), name='distributor-upgrade'),
    path('distributor/downgrade-to-individual/', DowngradeToIndividualView.as_view(), name='distributor-downgrade'),
    path('distributor/settlements/', SettlementSummaryView.as_view(), name='distributor-settlements'),
    path('distributor/sales/', DistributorSalesView.as_view(), name='distributor-sales'),
    path('distributor/dashboard/', DistributorDashboardView.as_view(), name='distributor-dashboard'),
    path('company/head-office-code/', HeadOfficeCodeView.as_view(), name='company-head-office-code'),
    path(
        'company/head-office-code/regenerate/',
        RegenerateHeadOfficeCodeView.as_view(),
        name='company-head-office-code-regenerate',
    ),
    path('company/sales/', CompanySalesView.as_view(), name='company-sales'),
    path('', include(router.urls)),
]
