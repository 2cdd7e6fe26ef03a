"""
Distributor services - contract lifecycle, onboarding and chain management.
"""
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core import services as system_settings
from apps.core.observability import get_sanitized_logger, metrics
from apps.core.observability.events import log_contract_transition, log_domain_event
from apps.core.services import SettingKeys
from apps.products.models import DistributorProduct
from apps.qrcodes import images as qr_images
from apps.qrcodes.models import QRCode, QRCodeProduct
from apps.sales.models import Sale

from .access import generate_unique_company_code
from .models import (
    Company,
    CompanyType,
    ContractStatus,
    Distributor,
    DistributorType,
    ShelfReturnStatus,
    add_months,
)

logger = get_sanitized_logger(__name__)


class ContractTransitionError(ValidationError):
    """Raised when a contract action is not allowed in the current state."""
    pass


class OnboardingError(ValidationError):
    """Raised when a new contract or plan change cannot be applied."""
    pass


class LocationError(ValidationError):
    """Raised when a chain location cannot be changed."""
    pass


# ============================================================================
# Contract lifecycle
# ============================================================================

def _record_transition(distributor, action, from_status):
    metrics.contract_transitions_total.labels(action=action, result='success').inc()
    log_contract_transition(distributor, from_status, distributor.contract_status, action=action)


def _reject_transition(distributor, action, message):
    metrics.contract_transitions_total.labels(action=action, result='rejected').inc()
    log_contract_transition(
        distributor,
        distributor.contract_status,
        distributor.contract_status,
        result='blocked',
        action=action,
    )
    raise ContractTransitionError(message)


@transaction.atomic
def request_cancellation(distributor: Distributor) -> Distributor:
    """
    Request contract cancellation and open the shelf return window.

    Raises:
        ContractTransitionError: contract younger than one year, or not active
    """
    if distributor.contract_status != ContractStatus.ACTIVE:
        _reject_transition(distributor, 'request_cancellation', 'Cancellation can only be requested for an active contract.')

    if not distributor.can_cancel_contract:
        maturity = timezone.localtime(distributor.contract_maturity_date)
        _reject_transition(
            distributor,
            'request_cancellation',
            f'The contract can be cancelled from {maturity:%Y-%m-%d} (one year after the start date).'
        )

    window_days = system_settings.get_int(*SettingKeys.SHELF_RETURN_WINDOW_DAYS, default=30)
    now = timezone.now()
    from_status = distributor.contract_status

    distributor.contract_status = ContractStatus.CANCELLATION_REQUESTED
    distributor.cancellation_request_date = now
    distributor.shelf_return_due_date = now + timedelta(days=window_days)
    distributor.shelf_return_status = ShelfReturnStatus.SCHEDULED
    distributor.save()

    _record_transition(distributor, 'request_cancellation', from_status)
    return distributor


@transaction.atomic
def confirm_shelf_return(distributor: Distributor) -> Distributor:
    """Record that the shelf came back; an admin completes the cancellation afterwards."""
    if distributor.contract_status != ContractStatus.CANCELLATION_REQUESTED:
        _reject_transition(distributor, 'confirm_shelf_return', 'No cancellation has been requested for this contract.')

    from_status = distributor.contract_status
    distributor.shelf_returned_date = timezone.now()
    distributor.shelf_return_status = ShelfReturnStatus.COMPLETED
    distributor.contract_status = ContractStatus.PENDING_SHELF_RETURN
    distributor.save()

    _record_transition(distributor, 'confirm_shelf_return', from_status)
    return distributor


@transaction.atomic
def extend_contract(distributor: Distributor) -> Distributor:
    """Withdraw a cancellation request before the shelf is returned."""
    if distributor.contract_status != ContractStatus.CANCELLATION_REQUESTED:
        _reject_transition(distributor, 'extend_contract', 'No cancellation has been requested for this contract.')

    if distributor.shelf_return_status == ShelfReturnStatus.COMPLETED:
        _reject_transition(distributor, 'extend_contract', 'The shelf has already been returned.')

    from_status = distributor.contract_status
    distributor.contract_status = ContractStatus.ACTIVE
    distributor.cancellation_request_date = None
    distributor.shelf_return_due_date = None
    distributor.shelf_return_status = ShelfReturnStatus.NOT_REQUIRED
    distributor.save()

    _record_transition(distributor, 'extend_contract', from_status)
    return distributor


@transaction.atomic
def mark_overdue(distributor: Distributor) -> Distributor:
    """Flag a shelf return whose due date has passed."""
    due = distributor.shelf_return_due_date
    if due is None or due >= timezone.now():
        _reject_transition(distributor, 'mark_overdue', 'The shelf return due date has not passed yet.')

    distributor.shelf_return_status = ShelfReturnStatus.OVERDUE
    distributor.save(update_fields=['shelf_return_status', 'updated_at'])

    _record_transition(distributor, 'mark_overdue', distributor.contract_status)
    return distributor


def _delete_qr_codes(distributor: Distributor):
    """Delete the location's QR codes; their PNGs are removed once the transaction commits."""
    codes = list(QRCode.objects.filter(distributor=distributor).values_list('code', flat=True))
    QRCodeProduct.objects.filter(qr_code__distributor=distributor).delete()
    QRCode.objects.filter(distributor=distributor).delete()
    for code in codes:
        transaction.on_commit(lambda c=code: qr_images.delete_qr_image(c))


def remove_distributor(distributor: Distributor):
    """
    Delete a location and everything hanging off it.

    QR codes with their assignments and product selections are deleted,
    sales are detached (history is kept) and the owning user is locked.
    Must run inside a transaction.
    """
    user = distributor.user

    _delete_qr_codes(distributor)
    DistributorProduct.objects.filter(distributor=distributor).delete()
    Sale.objects.filter(distributor=distributor).update(distributor=None)

    distributor.delete()

    if user.is_active:
        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])


def complete_cancellation(distributor: Distributor) -> int:
    """
    Remove the records of a cancelled contract (admin).

    A head office takes its whole company down with it; an individual
    store or chain store is removed alone.

    Returns:
        Number of distributors removed

    Raises:
        ContractTransitionError: shelf not returned yet, or removal failed
            (nothing is changed in that case)
    """
    if distributor.shelf_return_status != ShelfReturnStatus.COMPLETED:
        _reject_transition(distributor, 'complete_cancellation', 'The shelf has not been returned yet.')

    distributor_type = distributor.distributor_type
    distributor_id = distributor.id

    try:
        with transaction.atomic():
            if distributor_type == DistributorType.HEAD_OFFICE and distributor.company_id:
                company = distributor.company
                locations = list(
                    Distributor.objects.filter(company=company)
                    .select_related('user')
                    .order_by('id')
                )
                # Stores reference the head office as parent; remove them first
                locations.sort(key=lambda d: d.distributor_type == DistributorType.HEAD_OFFICE)
                for location in locations:
                    remove_distributor(location)
                company.delete()
                removed = len(locations)
            else:
                remove_distributor(distributor)
                removed = 1
    except Exception as e:
        metrics.contract_completions_total.labels(distributor_type=distributor_type, result='failure').inc()
        logger.error(
            'Contract completion rolled back',
            exc_info=True,
            extra={
                'event': 'contract.complete_cancellation_failed',
                'distributor_id': str(distributor_id),
            }
        )
        raise ContractTransitionError(f'Contract completion failed: {e}') from e

    metrics.contract_completions_total.labels(distributor_type=distributor_type, result='success').inc()
    log_domain_event(
        'contract.cancellation_completed',
        entity_type='Distributor',
        entity_id=str(distributor_id),
        distributor_type=distributor_type,
        removed_locations=removed,
    )
    return removed


def set_distributor_active(distributor: Distributor, is_active: bool) -> Distributor:
    """Admin switch for a location."""
    distributor.is_active = is_active
    distributor.save(update_fields=['is_active', 'updated_at'])
    log_domain_event(
        'distributor.activated' if is_active else 'distributor.deactivated',
        entity_type='Distributor',
        entity_id=str(distributor.id),
    )
    return distributor


# ============================================================================
# Onboarding and plan changes
# ============================================================================

def _monthly_fee(key, default):
    return system_settings.get_decimal(*key, default=Decimal(default))


@transaction.atomic
def new_contract(
    user,
    company_name: str,
    location_name: str,
    address: str = '',
    phone: str = '',
    head_office_code: Optional[str] = None,
) -> Distributor:
    """
    Sign a shelf contract for ``user``.

    With ``head_office_code`` the location joins that chain as a store;
    otherwise a new individual company is created.

    Raises:
        OnboardingError: user already under contract, missing names, or
            unknown head office code
    """
    if Distributor.objects.filter(user=user, is_active=True).exists():
        raise OnboardingError('This account already has an active contract.')

    company_name = (company_name or '').strip()
    location_name = (location_name or '').strip()
    if not company_name or not location_name:
        raise OnboardingError('Company name and location name are required.')

    shelf_count = system_settings.get_int(*SettingKeys.DEFAULT_SHELF_COUNT, default=1)
    selection_count = system_settings.get_int(*SettingKeys.DEFAULT_PRODUCT_SELECTION_COUNT, default=10)
    duration_months = system_settings.get_int(*SettingKeys.DEFAULT_CONTRACT_DURATION_MONTHS, default=12)
    now = timezone.now()

    parent = None
    if head_office_code:
        company = Company.objects.filter(
            head_office_code=head_office_code.strip(),
            is_active=True,
        ).first()
        if company is None:
            raise OnboardingError('No active company matches this head office code.')
        distributor_type = DistributorType.STORE
        monthly_fee = _monthly_fee(SettingKeys.MONTHLY_FEE_CHAIN_STORE, '4000')
        parent = company.distributors.filter(
            distributor_type=DistributorType.HEAD_OFFICE,
            is_active=True,
        ).first()
    else:
        company = Company.objects.create(
            company_name=company_name,
            headquarters_address=address or '',
            phone=phone or '',
            email=user.email,
            company_type=CompanyType.INDIVIDUAL,
            head_office_code=generate_unique_company_code(),
            owner_user=user,
        )
        distributor_type = DistributorType.INDIVIDUAL
        monthly_fee = _monthly_fee(SettingKeys.MONTHLY_FEE_INDIVIDUAL, '5000')

    distributor = Distributor.objects.create(
        user=user,
        company=company,
        company_name=company_name,
        location_name=location_name,
        address=address or '',
        phone=phone or '',
        distributor_type=distributor_type,
        is_headquarters=distributor_type != DistributorType.STORE,
        parent_distributor=parent,
        shelf_count=shelf_count,
        product_selection_count=selection_count,
        monthly_fee=monthly_fee,
        contract_start_date=now,
        contract_end_date=add_months(now, duration_months),
    )

    log_domain_event(
        'contract.signed',
        entity_type='Distributor',
        entity_id=str(distributor.id),
        entity_ids={'company_id': str(company.id)},
        distributor_type=distributor_type,
    )
    return distributor


def update_location_details(distributor: Distributor, **fields) -> Distributor:
    """Update contact fields of a location (address, phone, location_name)."""
    allowed = {'address', 'phone', 'location_name'}
    changed = []
    for name, value in fields.items():
        if name in allowed and value is not None:
            setattr(distributor, name, value)
            changed.append(name)
    if changed:
        distributor.save(update_fields=changed + ['updated_at'])
    return distributor


@transaction.atomic
def upgrade_to_chain(distributor: Distributor) -> bool:
    """
    Turn an individual store into a chain head office.

    Returns:
        False when the company was already a chain (nothing changed)
    """
    company = distributor.company
    if company is not None and company.is_chain and distributor.distributor_type == DistributorType.HEAD_OFFICE:
        return False

    if distributor.distributor_type == DistributorType.STORE:
        raise OnboardingError('A chain store cannot become a head office.')

    if company is None:
        company = Company.objects.create(
            company_name=distributor.company_name,
            headquarters_address=distributor.address,
            phone=distributor.phone,
            email=distributor.user.email,
            owner_user=distributor.user,
        )
        distributor.company = company

    company.company_type = CompanyType.CHAIN
    if not company.head_office_code:
        company.head_office_code = generate_unique_company_code()
    company.save()

    distributor.distributor_type = DistributorType.HEAD_OFFICE
    distributor.is_headquarters = True
    distributor.monthly_fee = _monthly_fee(SettingKeys.MONTHLY_FEE_HEAD_OFFICE, '6000')
    distributor.save()

    log_domain_event(
        'company.upgraded_to_chain',
        entity_type='Company',
        entity_id=str(company.id),
        entity_ids={'distributor_id': str(distributor.id)},
    )
    return True


@transaction.atomic
def downgrade_to_individual(distributor: Distributor) -> Distributor:
    """
    Turn a head office back into an individual store.

    Raises:
        OnboardingError: not a head office, or stores still attached
    """
    if distributor.distributor_type != DistributorType.HEAD_OFFICE or distributor.company is None:
        raise OnboardingError('Only a chain head office can switch back to an individual plan.')

    has_stores = Distributor.objects.filter(
        company=distributor.company,
        distributor_type=DistributorType.STORE,
    ).exists()
    if has_stores:
        raise OnboardingError('Remove every store location before switching back to an individual plan.')

    company = distributor.company
    company.company_type = CompanyType.INDIVIDUAL
    company.save(update_fields=['company_type', 'updated_at'])

    distributor.distributor_type = DistributorType.INDIVIDUAL
    distributor.monthly_fee = _monthly_fee(SettingKeys.MONTHLY_FEE_INDIVIDUAL, '5000')
    distributor.save()

    log_domain_event(
        'company.downgraded_to_individual',
        entity_type='Company',
        entity_id=str(company.id),
    )
    return distributor


# ============================================================================
# Chain (head office) management
# ============================================================================

def regenerate_head_office_code(company: Company) -> str:
    company.head_office_code = generate_unique_company_code()
    company.save(update_fields=['head_office_code', 'updated_at'])
    log_domain_event('company.head_office_code_regenerated', entity_type='Company', entity_id=str(company.id))
    return company.head_office_code


@transaction.atomic
def delete_location(head_office: Distributor, location: Distributor):
    """
    Remove a chain store from the company.

    Raises:
        LocationError: not a store of this company, or it has sales
    """
    if location.company_id != head_office.company_id or location.distributor_type != DistributorType.STORE:
        raise LocationError('Only store locations of your company can be deleted.')

    if Sale.objects.filter(distributor=location).exists():
        raise LocationError('This location has sales records and cannot be deleted.')

    _delete_qr_codes(location)
    DistributorProduct.objects.filter(distributor=location).delete()
    location_id = location.id
    location.delete()

    log_domain_event(
        'company.location_deleted',
        entity_type='Distributor',
        entity_id=str(location_id),
        entity_ids={'company_id': str(head_office.company_id)},
    )
