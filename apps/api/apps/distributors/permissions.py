"""
Distributor permissions.
"""
from apps.authz.permissions import IsDistributor

from .access import get_head_office_distributor


class IsHeadOffice(IsDistributor):
    """
    Head office of a chain company.

    Stores and individual distributors are refused with 403.
    """
    message = 'This area is available to chain head offices only.'

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        head_office = get_head_office_distributor(request.user)
        if head_office is None:
            return False
        view.head_office = head_office
        return True
