"""
Distributor access rules.

A user reaches its own active distributors. A chain head office also
reaches every active location of its company.
"""
import secrets
from typing import List, Optional

from .models import Company, CompanyType, Distributor, DistributorType


def get_user_distributors(user) -> List[Distributor]:
    return list(
        Distributor.objects.filter(user=user, is_active=True)
        .select_related('company')
        .order_by('created_at')
    )


def get_head_office_distributor(user) -> Optional[Distributor]:
    """The user's active head office of a chain company, if any."""
    return (
        Distributor.objects.filter(
            user=user,
            is_active=True,
            distributor_type=DistributorType.HEAD_OFFICE,
            company__company_type=CompanyType.CHAIN,
        )
        .select_related('company')
        .first()
    )


def get_accessible_distributors(user):
    """Queryset of distributors the user may manage."""
    head_office = get_head_office_distributor(user)
    if head_office is not None:
        return Distributor.objects.filter(
            company_id=head_office.company_id,
            is_active=True,
        ).select_related('company', 'user')
    return Distributor.objects.filter(user=user, is_active=True).select_related('company', 'user')


def get_target_distributor(user, location_id=None) -> Optional[Distributor]:
    """
    Resolve the location a request operates on.

    Args:
        user: Requesting user
        location_id: Optional distributor id chosen by the client

    Returns:
        The distributor, or None when the id is unknown or not reachable.
        Without ``location_id`` the user's first own distributor is used.
    """
    if location_id in (None, ''):
        return (
            Distributor.objects.filter(user=user, is_active=True)
            .select_related('company')
            .order_by('created_at')
            .first()
        )

    try:
        location_id = int(location_id)
    except (TypeError, ValueError):
        return None

    return get_accessible_distributors(user).filter(pk=location_id).first()


def has_access_to_distributor(user, distributor: Distributor) -> bool:
    if distributor.user_id == user.pk:
        return True
    head_office = get_head_office_distributor(user)
    return (
        head_office is not None
        and distributor.company_id is not None
        and distributor.company_id == head_office.company_id
    )


def has_access_to_qrcode(user, qr_code) -> bool:
    return has_access_to_distributor(user, qr_code.distributor)


def generate_unique_company_code() -> str:
    """Random 8-digit head office code not used by any company."""
    while True:
        code = f"{secrets.randbelow(10 ** 8):08d}"
        if not Company.objects.filter(head_office_code=code).exists():
            return code
