"""
QR code services - issuance, activation and storefront product assignment.
"""
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.observability import log_domain_event, metrics
from apps.core.observability.events import log_quota_rejected
from apps.products.models import DistributorProduct, Product
from apps.products.services import DuplicateAssignmentError, ProductUnavailableError, QuotaExceededError

from . import images
from .models import QRCode, QRCodeProduct


class QRCodeExistsError(ValidationError):
    """Raised when a location already owns a QR code."""
    pass


class QRCodeStateError(ValidationError):
    """Raised when activation conflicts with the location's codes."""
    pass


# ============================================================================
# Issuance
# ============================================================================

@transaction.atomic
def generate_qr_code(distributor, location: str) -> QRCode:
    """
    Issue the storefront QR code of a location and render its image.

    Raises:
        ValidationError: location label missing
        QRCodeExistsError: the location already has a code, active or not
    """
    location = (location or '').strip()
    if not location:
        raise ValidationError('A location label is required.')

    existing = QRCode.objects.filter(distributor=distributor).first()
    if existing is not None:
        metrics.qr_codes_total.labels(action='generate', result='exists').inc()
        if existing.is_active:
            raise QRCodeExistsError('This location already has an active QR code.')
        raise QRCodeExistsError(
            'This location already has an inactive QR code. Activate it or delete it first.'
        )

    qr_code = QRCode.objects.create(distributor=distributor, location=location)
    qr_code.qr_code_image_url = images.save_qr_image(qr_code.code)
    qr_code.save(update_fields=['qr_code_image_url'])

    metrics.qr_codes_total.labels(action='generate', result='success').inc()
    log_domain_event(
        'qr_code.generated',
        entity_type='QRCode',
        entity_id=str(qr_code.id),
        entity_ids={'distributor_id': str(distributor.id)},
        code=qr_code.code,
    )
    return qr_code


def deactivate_qr_code(qr_code: QRCode) -> QRCode:
    qr_code.is_active = False
    qr_code.deactivated_at = timezone.now()
    qr_code.save(update_fields=['is_active', 'deactivated_at'])

    metrics.qr_codes_total.labels(action='deactivate', result='success').inc()
    log_domain_event('qr_code.deactivated', entity_type='QRCode', entity_id=str(qr_code.id))
    return qr_code


def activate_qr_code(qr_code: QRCode) -> QRCode:
    """
    Raises:
        QRCodeStateError: another active code exists at this location
    """
    conflict = (
        QRCode.objects.filter(distributor_id=qr_code.distributor_id, is_active=True)
        .exclude(pk=qr_code.pk)
        .exists()
    )
    if conflict:
        metrics.qr_codes_total.labels(action='activate', result='conflict').inc()
        raise QRCodeStateError('Another active QR code already exists at this location.')

    qr_code.is_active = True
    qr_code.deactivated_at = None
    qr_code.save(update_fields=['is_active', 'deactivated_at'])

    metrics.qr_codes_total.labels(action='activate', result='success').inc()
    log_domain_event('qr_code.activated', entity_type='QRCode', entity_id=str(qr_code.id))
    return qr_code


@transaction.atomic
def delete_qr_code(qr_code: QRCode):
    """Hard delete; assignments go with it."""
    qr_id = qr_code.id
    code = qr_code.code
    qr_code.delete()
    transaction.on_commit(lambda: images.delete_qr_image(code))

    metrics.qr_codes_total.labels(action='delete', result='success').inc()
    log_domain_event('qr_code.deleted', entity_type='QRCode', entity_id=str(qr_id), code=code)


def qr_code_png(qr_code: QRCode) -> bytes:
    return images.load_qr_image(qr_code.code)


# ============================================================================
# Storefront assignments
# ============================================================================

def active_assignment_count(qr_code: QRCode) -> int:
    return QRCodeProduct.objects.filter(qr_code=qr_code, is_active=True).count()


@transaction.atomic
def add_qr_product(
    qr_code: QRCode,
    product: Product,
    display_order: int = 0,
    notes: Optional[str] = None,
) -> QRCodeProduct:
    """
    Show ``product`` on the storefront of ``qr_code``.

    The quota is the owning distributor's product_selection_count. A
    removed assignment is reactivated with the new order and notes.

    Raises:
        ProductUnavailableError: product inactive
        DuplicateAssignmentError: already shown on this storefront
        QuotaExceededError: storefront full
    """
    if not product.is_active:
        raise ProductUnavailableError('This product is not available.')

    existing = (
        QRCodeProduct.objects.select_for_update()
        .filter(qr_code=qr_code, product=product)
        .first()
    )
    if existing is not None and existing.is_active:
        metrics.product_selection_total.labels(scope='qr_code', action='add', result='duplicate').inc()
        raise DuplicateAssignmentError('This product is already shown on this QR code.')

    limit = qr_code.distributor.product_selection_count
    if active_assignment_count(qr_code) >= limit:
        metrics.product_selection_total.labels(scope='qr_code', action='add', result='quota_exceeded').inc()
        log_quota_rejected('QRCode', qr_code.id, product.id, limit)
        raise QuotaExceededError(f'A QR code can show up to {limit} products.')

    if existing is not None:
        existing.is_active = True
        existing.removed_at = None
        existing.display_order = display_order
        existing.notes = notes or ''
        existing.save(update_fields=['is_active', 'removed_at', 'display_order', 'notes'])
        assignment = existing
    else:
        assignment = QRCodeProduct.objects.create(
            qr_code=qr_code,
            product=product,
            display_order=display_order,
            notes=notes or '',
        )

    metrics.product_selection_total.labels(scope='qr_code', action='add', result='success').inc()
    log_domain_event(
        'qr_code.product_added',
        entity_type='QRCode',
        entity_id=str(qr_code.id),
        entity_ids={'product_id': str(product.id)},
    )
    return assignment


def remove_qr_product(assignment: QRCodeProduct) -> QRCodeProduct:
    assignment.is_active = False
    assignment.removed_at = timezone.now()
    assignment.save(update_fields=['is_active', 'removed_at'])

    metrics.product_selection_total.labels(scope='qr_code', action='remove', result='success').inc()
    log_domain_event(
        'qr_code.product_removed',
        entity_type='QRCode',
        entity_id=str(assignment.qr_code_id),
        entity_ids={'product_id': str(assignment.product_id)},
    )
    return assignment


# ============================================================================
# Storefront queries
# ============================================================================

def get_active_qr_code(code: str) -> Optional[QRCode]:
    return (
        QRCode.objects.filter(code=code, is_active=True)
        .select_related('distributor')
        .first()
    )


def storefront_assignments(qr_code: QRCode):
    """Active assignments whose product is on sale and in stock."""
    return (
        QRCodeProduct.objects.filter(
            qr_code=qr_code,
            is_active=True,
            product__is_active=True,
            product__stock_quantity__gt=0,
        )
        .select_related('product__manufacturer')
        .order_by('display_order', 'assigned_at')
    )


def offered_product_ids(qr_code: QRCode) -> set:
    """
    Products a consumer may open or buy from this storefront.

    Active QR assignments plus the distributor's active selections.
    """
    assigned = QRCodeProduct.objects.filter(
        qr_code=qr_code,
        is_active=True,
    ).values_list('product_id', flat=True)
    selected = DistributorProduct.objects.filter(
        distributor_id=qr_code.distributor_id,
        is_active=True,
    ).values_list('product_id', flat=True)
    return set(assigned) | set(selected)
