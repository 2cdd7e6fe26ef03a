"""
Role-based permissions.

Each user carries a single role; endpoints are gated by comparing it.
"""
from rest_framework import permissions
from apps.authz.models import RoleChoices


class HasRole(permissions.BasePermission):
    """
    Base permission: authenticated, active, and role in ``allowed_roles``.
    """
    allowed_roles = ()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated or not user.is_active:
            return False
        return user.role in self.allowed_roles


class IsAdmin(HasRole):
    """Platform administrators only."""
    allowed_roles = (RoleChoices.ADMIN,)


class IsDistributor(HasRole):
    """Distributor accounts (individual, head office and store)."""
    allowed_roles = (RoleChoices.DISTRIBUTOR,)


class IsManufacturer(HasRole):
    """Manufacturer accounts."""
    allowed_roles = (RoleChoices.MANUFACTURER,)


class IsConsumer(HasRole):
    """Consumers placing orders from storefronts."""
    allowed_roles = (RoleChoices.CONSUMER,)
