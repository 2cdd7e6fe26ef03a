"""
Product services - manufacturer catalog management and shelf selections.
"""
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.authz.models import RoleChoices
from apps.core.observability import metrics
from apps.core.observability.events import log_domain_event, log_quota_rejected

from .models import DistributorProduct, Manufacturer, Product


class QuotaExceededError(ValidationError):
    """Raised when a shelf already holds its maximum number of products."""
    pass


class DuplicateAssignmentError(ValidationError):
    """Raised when a product is already actively selected."""
    pass


class ProductUnavailableError(ValidationError):
    """Raised when an inactive product is offered for selection."""
    pass


# ============================================================================
# Manufacturer access
# ============================================================================

def get_or_create_manufacturer(user) -> Manufacturer:
    """
    Manufacturer profile of ``user``, created on first access.
    """
    manufacturer, created = Manufacturer.objects.get_or_create(
        user=user,
        defaults={'company_name': user.company_name or user.email},
    )
    if created:
        log_domain_event(
            'manufacturer.profile_created',
            entity_type='Manufacturer',
            entity_id=str(manufacturer.id),
        )
    return manufacturer


def get_manufacturer_by_user(user) -> Optional[Manufacturer]:
    if user.role != RoleChoices.MANUFACTURER:
        return None
    return Manufacturer.objects.filter(user=user).first()


def get_manufacturer_products(manufacturer: Manufacturer, include_inactive: bool = False):
    queryset = Product.objects.filter(manufacturer=manufacturer)
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    return queryset.order_by('name')


def has_access_to_product(user, product: Product) -> bool:
    manufacturer = get_manufacturer_by_user(user)
    return manufacturer is not None and product.manufacturer_id == manufacturer.id


def update_stock(product: Product, quantity: int) -> Product:
    if quantity is None or quantity < 0:
        raise ValidationError('Stock quantity cannot be negative.')
    product.stock_quantity = quantity
    product.save(update_fields=['stock_quantity', 'updated_at'])
    log_domain_event(
        'product.stock_updated',
        entity_type='Product',
        entity_id=str(product.id),
        stock_quantity=quantity,
    )
    return product


def deactivate_product(product: Product) -> Product:
    """Products stay in the table because order lines reference them."""
    product.is_active = False
    product.save(update_fields=['is_active', 'updated_at'])
    return product


def manufacturer_stats(manufacturer: Manufacturer) -> dict:
    """Dashboard numbers for a manufacturer."""
    from apps.sales.models import Order, Settlement, SettlementStatus, SettlementType

    now = timezone.localtime()
    monthly_revenue = Settlement.objects.filter(
        manufacturer=manufacturer,
        settlement_type=SettlementType.MANUFACTURER_SALES,
        status=SettlementStatus.COMPLETED,
        processed_date__year=now.year,
        processed_date__month=now.month,
    ).aggregate(total=Sum('amount'))['total'] or 0

    return {
        'active_products': Product.objects.filter(manufacturer=manufacturer, is_active=True).count(),
        'total_orders': Order.objects.filter(items__product__manufacturer=manufacturer).distinct().count(),
        'monthly_revenue': monthly_revenue,
    }


# ============================================================================
# Catalog (distributor side)
# ============================================================================

def catalog_queryset(search: Optional[str] = None, category: Optional[str] = None, manufacturer_id=None):
    """Active products of active manufacturers with optional filters."""
    queryset = Product.objects.filter(
        is_active=True,
        manufacturer__is_active=True,
    ).select_related('manufacturer')

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(description__icontains=search) |
            Q(manufacturer__company_name__icontains=search)
        )
    if category:
        queryset = queryset.filter(category=category)
    if manufacturer_id:
        queryset = queryset.filter(manufacturer_id=manufacturer_id)

    return queryset.order_by('name')


def catalog_categories():
    return list(
        Product.objects.filter(is_active=True, manufacturer__is_active=True)
        .exclude(category='')
        .values_list('category', flat=True)
        .distinct()
        .order_by('category')
    )


def catalog_manufacturers():
    return (
        Manufacturer.objects.filter(is_active=True)
        .annotate(active_products=Count('products', filter=Q(products__is_active=True)))
        .order_by('company_name')
    )


# ============================================================================
# Distributor selections
# ============================================================================

def active_selection_count(distributor) -> int:
    return DistributorProduct.objects.filter(distributor=distributor, is_active=True).count()


@transaction.atomic
def add_distributor_product(distributor, product: Product) -> DistributorProduct:
    """
    Put ``product`` on the distributor's shelf.

    A previously removed selection is reactivated instead of duplicated.

    Raises:
        ProductUnavailableError: product or manufacturer inactive
        QuotaExceededError: product_selection_count reached
        DuplicateAssignmentError: already selected
    """
    if not product.is_active or not product.manufacturer.is_active:
        raise ProductUnavailableError('This product is not available.')

    existing = (
        DistributorProduct.objects.select_for_update()
        .filter(distributor=distributor, product=product)
        .first()
    )
    if existing is not None and existing.is_active:
        metrics.product_selection_total.labels(scope='distributor', action='add', result='duplicate').inc()
        raise DuplicateAssignmentError('This product is already selected.')

    limit = distributor.product_selection_count
    if active_selection_count(distributor) >= limit:
        metrics.product_selection_total.labels(scope='distributor', action='add', result='quota_exceeded').inc()
        log_quota_rejected('Distributor', distributor.id, product.id, limit)
        raise QuotaExceededError(f'You can select up to {limit} products.')

    if existing is not None:
        existing.is_active = True
        existing.removed_at = None
        existing.assigned_at = timezone.now()
        existing.save(update_fields=['is_active', 'removed_at', 'assigned_at'])
        selection = existing
    else:
        selection = DistributorProduct.objects.create(distributor=distributor, product=product)

    metrics.product_selection_total.labels(scope='distributor', action='add', result='success').inc()
    log_domain_event(
        'product_selection.added',
        entity_type='Distributor',
        entity_id=str(distributor.id),
        entity_ids={'product_id': str(product.id)},
    )
    return selection


def remove_distributor_product(selection: DistributorProduct) -> DistributorProduct:
    """Soft removal; the row is kept for reactivation."""
    selection.is_active = False
    selection.removed_at = timezone.now()
    selection.save(update_fields=['is_active', 'removed_at'])

    metrics.product_selection_total.labels(scope='distributor', action='remove', result='success').inc()
    log_domain_event(
        'product_selection.removed',
        entity_type='Distributor',
        entity_id=str(selection.distributor_id),
        entity_ids={'product_id': str(selection.product_id)},
    )
    return selection
