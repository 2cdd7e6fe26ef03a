"""
Sales service layer - checkout, order fulfilment and financial reporting.

Checkout:
- stock is locked with select_for_update and decremented in the same
  transaction that creates the order, its lines and the sale entry
- commission and platform fee come from the PRICING settings
"""
import time
from collections import OrderedDict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncDay, TruncMonth
from django.utils import timezone

from apps.core import services as system_settings
from apps.core.observability import get_sanitized_logger, log_domain_event, metrics
from apps.core.services import SettingKeys
from apps.distributors.models import Distributor
from apps.products.models import Manufacturer, Product, Review

from .models import (
    Order,
    OrderItem,
    OrderStatus,
    Sale,
    SampleOrder,
    SampleOrderStatus,
    Settlement,
    SettlementStatus,
)

logger = get_sanitized_logger(__name__)

CENT = Decimal('0.01')


class CheckoutError(ValidationError):
    """Raised when an order request cannot be fulfilled as submitted."""
    pass


class InsufficientStockError(CheckoutError):
    """Raised when a product has fewer units in stock than ordered."""
    pass


class OrderStatusError(ValidationError):
    """Raised for an unknown or disallowed order status change."""
    pass


class SettlementError(ValidationError):
    """Raised when a settlement is not pending."""
    pass


def _money(value) -> Decimal:
    return Decimal(value or 0).quantize(CENT, rounding=ROUND_HALF_UP)


def _month_bounds(now=None):
    now = timezone.localtime(now or timezone.now())
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, now


# ============================================================================
# Checkout
# ============================================================================

def _merge_lines(items) -> "OrderedDict[int, int]":
    lines = OrderedDict()
    for item in items:
        product_id = int(item['product_id'])
        lines[product_id] = lines.get(product_id, 0) + int(item['quantity'])
    return lines


def _line_shipping(product: Product, line_total: Decimal) -> Decimal:
    threshold = product.free_shipping_threshold
    if threshold is not None and line_total >= threshold:
        return Decimal('0.00')
    return _money(product.shipping_fee)


@transaction.atomic
def place_order(
    user,
    qr_code,
    items: List[Dict],
    offered_product_ids,
    shipping_name: str = '',
    shipping_address: str = '',
    shipping_phone: str = '',
    payment_intent_id: str = '',
) -> Order:
    """
    Checkout from a QR storefront.

    Args:
        user: Ordering consumer
        qr_code: Active QRCode the order comes from
        items: [{'product_id': int, 'quantity': int}, ...]
        offered_product_ids: Product ids offered on this storefront
        shipping_*: Delivery details stored on the order
        payment_intent_id: Opaque reference of the payment provider

    Returns:
        Paid Order with its items and one Sale entry

    Raises:
        CheckoutError: empty order, product not offered, below minimum quantity
        InsufficientStockError: not enough stock for a line
    """
    start_time = time.time()
    lines = _merge_lines(items)
    if not lines:
        raise CheckoutError('The order has no items.')

    offered = set(offered_product_ids)
    not_offered = [pid for pid in lines if pid not in offered]
    if not_offered:
        metrics.orders_placed_total.labels(result='not_offered').inc()
        raise CheckoutError('One or more products are not sold at this location.')

    products = {
        p.id: p
        for p in Product.objects.select_for_update().filter(id__in=list(lines), is_active=True)
    }

    subtotal = Decimal('0.00')
    shipping_fee = Decimal('0.00')
    priced_lines = []
    for product_id, quantity in lines.items():
        product = products.get(product_id)
        if product is None:
            metrics.orders_placed_total.labels(result='not_offered').inc()
            raise CheckoutError('One or more products are no longer available.')
        if quantity < product.minimum_order_quantity:
            metrics.orders_placed_total.labels(result='below_minimum').inc()
            raise CheckoutError(
                f'{product.name}: the minimum order quantity is {product.minimum_order_quantity}.'
            )
        if product.stock_quantity < quantity:
            metrics.orders_placed_total.labels(result='insufficient_stock').inc()
            logger.warning(
                'Checkout blocked - insufficient stock',
                extra={
                    'product_id': str(product.id),
                    'requested': quantity,
                    'available': product.stock_quantity,
                }
            )
            raise InsufficientStockError(
                f'{product.name}: only {product.stock_quantity} left in stock.'
            )

        unit_price = _money(product.retail_price)
        line_total = _money(unit_price * quantity)
        subtotal += line_total
        shipping_fee += _line_shipping(product, line_total)
        priced_lines.append((product, quantity, unit_price, line_total))

    distributor = qr_code.distributor
    order = Order.objects.create(
        user=user,
        distributor=distributor,
        total_amount=subtotal + shipping_fee,
        shipping_fee=shipping_fee,
        status=OrderStatus.PAID,
        payment_intent_id=payment_intent_id or '',
        shipping_name=shipping_name or '',
        shipping_address=shipping_address or '',
        shipping_phone=shipping_phone or '',
    )

    for product, quantity, unit_price, line_total in priced_lines:
        OrderItem.objects.create(
            order=order,
            product=product,
            quantity=quantity,
            unit_price=unit_price,
            total_price=line_total,
        )
        product.stock_quantity -= quantity
        product.save(update_fields=['stock_quantity', 'updated_at'])

    commission_rate = system_settings.get_decimal(*SettingKeys.DISTRIBUTOR_COMMISSION_RATE, default=Decimal('0.10'))
    platform_rate = system_settings.get_decimal(*SettingKeys.PLATFORM_FEE_RATE, default=Decimal('0.05'))

    sale = Sale.objects.create(
        order=order,
        distributor=distributor,
        qr_code=qr_code,
        total_amount=order.total_amount,
        distributor_commission=_money(subtotal * commission_rate),
        platform_fee=_money(subtotal * platform_rate),
    )

    duration_ms = int((time.time() - start_time) * 1000)
    metrics.orders_placed_total.labels(result='success').inc()
    log_domain_event(
        'order.placed',
        entity_type='Order',
        entity_id=str(order.id),
        entity_ids={
            'distributor_id': str(distributor.id),
            'sale_id': str(sale.id),
        },
        order_number=order.order_number,
        line_count=len(priced_lines),
        duration_ms=duration_ms,
    )
    return order


# ============================================================================
# Manufacturer orders
# ============================================================================

def manufacturer_order_items(manufacturer: Manufacturer):
    return (
        OrderItem.objects.filter(product__manufacturer=manufacturer)
        .select_related('order', 'product')
        .order_by('-order__created_at', 'id')
    )


def manufacturer_orders(manufacturer: Manufacturer) -> List[Dict]:
    """
    Orders containing the manufacturer's products.

    Returns:
        [{'order': Order, 'items': [OrderItem, ...], 'subtotal': Decimal}, ...]
        newest first; only the manufacturer's own lines are included.
    """
    grouped = OrderedDict()
    for item in manufacturer_order_items(manufacturer):
        entry = grouped.setdefault(item.order_id, {'order': item.order, 'items': [], 'subtotal': Decimal('0.00')})
        entry['items'].append(item)
        entry['subtotal'] += item.total_price
    return list(grouped.values())


def order_has_manufacturer_products(order: Order, manufacturer: Manufacturer) -> bool:
    return order.items.filter(product__manufacturer=manufacturer).exists()


STATUS_TIMESTAMPS = {
    OrderStatus.SHIPPED: 'shipped_at',
    OrderStatus.DELIVERED: 'delivered_at',
    OrderStatus.CANCELLED: 'cancelled_at',
}


@transaction.atomic
def update_order_status(order: Order, new_status: str, tracking_number: Optional[str] = None) -> Order:
    """
    Move an order forward on behalf of a manufacturer.

    Raises:
        OrderStatusError: unknown status
    """
    if new_status not in OrderStatus.values:
        raise OrderStatusError(f'Unknown order status: {new_status}')

    from_status = order.status
    order.status = new_status
    update_fields = ['status', 'updated_at']

    timestamp_field = STATUS_TIMESTAMPS.get(new_status)
    if timestamp_field:
        setattr(order, timestamp_field, timezone.now())
        update_fields.append(timestamp_field)

    if tracking_number:
        order.tracking_number = tracking_number
        update_fields.append('tracking_number')

    order.save(update_fields=update_fields)

    metrics.order_status_updates_total.labels(to_status=new_status).inc()
    log_domain_event(
        'order.status_updated',
        entity_type='Order',
        entity_id=str(order.id),
        from_status=from_status,
        to_status=new_status,
    )
    return order


def manufacturer_analytics(manufacturer: Manufacturer, top: int = 5) -> Dict:
    """Delivered revenue, monthly revenue for the current year and top products."""
    now = timezone.localtime()
    delivered = OrderItem.objects.filter(
        product__manufacturer=manufacturer,
        order__status=OrderStatus.DELIVERED,
    )

    monthly = (
        delivered.filter(order__created_at__year=now.year)
        .annotate(month=TruncMonth('order__created_at'))
        .values('month')
        .annotate(revenue=Sum('total_price'), quantity=Sum('quantity'))
        .order_by('month')
    )

    top_products = (
        OrderItem.objects.filter(product__manufacturer=manufacturer)
        .exclude(order__status__in=[OrderStatus.CANCELLED, OrderStatus.REFUNDED])
        .values('product_id', 'product__name')
        .annotate(quantity=Sum('quantity'), revenue=Sum('total_price'))
        .order_by('-quantity', 'product__name')[:top]
    )

    return {
        'delivered_total': delivered.aggregate(total=Sum('total_price'))['total'] or Decimal('0.00'),
        'monthly_revenue': [
            {'month': row['month'].strftime('%Y-%m'), 'revenue': row['revenue'], 'quantity': row['quantity']}
            for row in monthly
        ],
        'top_products': [
            {
                'product_id': row['product_id'],
                'name': row['product__name'],
                'quantity': row['quantity'],
                'revenue': row['revenue'],
            }
            for row in top_products
        ],
    }


# ============================================================================
# Distributor reporting
# ============================================================================

def settlement_summary(distributors) -> Dict:
    """
    Sales and commission of ``distributors``, overall and by month.

    Args:
        distributors: Queryset or list of Distributor
    """
    sales = Sale.objects.filter(distributor__in=distributors)
    totals = sales.aggregate(
        count=Count('id'),
        total_sales=Sum('total_amount'),
        total_commission=Sum('distributor_commission'),
    )
    monthly = (
        sales.annotate(month=TruncMonth('sale_date'))
        .values('month')
        .annotate(
            count=Count('id'),
            total_sales=Sum('total_amount'),
            commission=Sum('distributor_commission'),
        )
        .order_by('-month')
    )
    return {
        'sales_count': totals['count'] or 0,
        'total_sales': totals['total_sales'] or Decimal('0.00'),
        'total_commission': totals['total_commission'] or Decimal('0.00'),
        'monthly': [
            {
                'month': row['month'].strftime('%Y-%m'),
                'sales_count': row['count'],
                'total_sales': row['total_sales'],
                'commission': row['commission'],
            }
            for row in monthly
        ],
    }


def location_sales(distributor: Distributor):
    """Sales of one location, newest first."""
    return (
        Sale.objects.filter(distributor=distributor)
        .select_related('distributor', 'order')
        .order_by('-sale_date', '-id')
    )


def monthly_summary(distributor: Distributor, now=None) -> Dict:
    """Sales and commission of a location since the start of the current month."""
    month_start, now = _month_bounds(now)
    totals = Sale.objects.filter(
        distributor=distributor,
        sale_date__gte=month_start,
        sale_date__lte=now,
    ).aggregate(
        count=Count('id'),
        total_sales=Sum('total_amount'),
        commission=Sum('distributor_commission'),
    )
    return {
        'month': month_start.strftime('%Y-%m'),
        'monthly_sales_count': totals['count'] or 0,
        'monthly_sales': totals['total_sales'] or Decimal('0.00'),
        'monthly_commission': totals['commission'] or Decimal('0.00'),
    }


def company_sales(head_office: Distributor, recent: int = 50) -> Dict:
    """Per-location totals and recent sales of a chain company."""
    locations = head_office.company_locations()
    sales = Sale.objects.filter(distributor__in=locations).select_related('distributor', 'order')

    per_location = (
        sales.values('distributor_id', 'distributor__location_name')
        .annotate(
            sales_count=Count('id'),
            total_sales=Sum('total_amount'),
            commission=Sum('distributor_commission'),
        )
        .order_by('-total_sales')
    )
    totals = sales.aggregate(total_sales=Sum('total_amount'), commission=Sum('distributor_commission'))

    return {
        'total_sales': totals['total_sales'] or Decimal('0.00'),
        'total_commission': totals['commission'] or Decimal('0.00'),
        'locations': [
            {
                'location_id': row['distributor_id'],
                'location_name': row['distributor__location_name'],
                'sales_count': row['sales_count'],
                'total_sales': row['total_sales'],
                'commission': row['commission'],
            }
            for row in per_location
        ],
        'recent_sales': list(sales.order_by('-sale_date')[:recent]),
    }


# ============================================================================
# Admin
# ============================================================================

def admin_dashboard() -> Dict:
    month_start, now = _month_bounds()
    return {
        'active_distributors': Distributor.objects.filter(is_active=True).count(),
        'active_manufacturers': Manufacturer.objects.filter(is_active=True).count(),
        'active_products': Product.objects.filter(is_active=True).count(),
        'monthly_platform_fee': Sale.objects.filter(
            sale_date__gte=month_start,
            sale_date__lte=now,
        ).aggregate(total=Sum('platform_fee'))['total'] or Decimal('0.00'),
        'recent_orders': list(
            Order.objects.select_related('user', 'distributor').order_by('-created_at')[:10]
        ),
    }


def admin_analytics(top: int = 10) -> Dict:
    """
    Platform-wide revenue figures.

    Returns:
        daily (this month), monthly (this year), yearly totals, top products
        by quantity and top distributors by sales
    """
    month_start, now = _month_bounds()
    sales = Sale.objects.all()

    daily = (
        sales.filter(sale_date__gte=month_start, sale_date__lte=now)
        .annotate(day=TruncDay('sale_date'))
        .values('day')
        .annotate(revenue=Sum('total_amount'), platform_fee=Sum('platform_fee'))
        .order_by('day')
    )
    monthly = (
        sales.filter(sale_date__year=now.year)
        .annotate(month=TruncMonth('sale_date'))
        .values('month')
        .annotate(
            revenue=Sum('total_amount'),
            platform_fee=Sum('platform_fee'),
            commission=Sum('distributor_commission'),
            order_count=Count('order', distinct=True),
        )
        .order_by('month')
    )
    yearly = sales.filter(sale_date__year=now.year).aggregate(
        revenue=Sum('total_amount'),
        platform_fee=Sum('platform_fee'),
        commission=Sum('distributor_commission'),
        order_count=Count('order', distinct=True),
    )
    top_products = (
        OrderItem.objects.exclude(order__status__in=[OrderStatus.CANCELLED, OrderStatus.REFUNDED])
        .values('product_id', 'product__name')
        .annotate(quantity=Sum('quantity'), revenue=Sum('total_price'))
        .order_by('-quantity', 'product__name')[:top]
    )
    top_distributors = (
        sales.filter(distributor__isnull=False)
        .values('distributor_id', 'distributor__company_name', 'distributor__location_name')
        .annotate(revenue=Sum('total_amount'), sales_count=Count('id'))
        .order_by('-revenue')[:top]
    )

    return {
        'daily': [
            {'day': row['day'].strftime('%Y-%m-%d'), 'revenue': row['revenue'], 'platform_fee': row['platform_fee']}
            for row in daily
        ],
        'monthly': [
            {
                'month': row['month'].strftime('%Y-%m'),
                'revenue': row['revenue'],
                'platform_fee': row['platform_fee'],
                'commission': row['commission'],
                'order_count': row['order_count'],
            }
            for row in monthly
        ],
        'yearly': {
            'revenue': yearly['revenue'] or Decimal('0.00'),
            'platform_fee': yearly['platform_fee'] or Decimal('0.00'),
            'commission': yearly['commission'] or Decimal('0.00'),
            'order_count': yearly['order_count'] or 0,
        },
        'top_products': [
            {
                'product_id': row['product_id'],
                'name': row['product__name'],
                'quantity': row['quantity'],
                'revenue': row['revenue'],
            }
            for row in top_products
        ],
        'top_distributors': [
            {
                'distributor_id': row['distributor_id'],
                'company_name': row['distributor__company_name'],
                'location_name': row['distributor__location_name'],
                'revenue': row['revenue'],
                'sales_count': row['sales_count'],
            }
            for row in top_distributors
        ],
    }


def admin_sales(limit: int = 100) -> Dict:
    latest = Sale.objects.select_related('order', 'distributor').order_by('-sale_date')[:limit]
    totals = Sale.objects.aggregate(
        total_sales=Sum('total_amount'),
        total_commission=Sum('distributor_commission'),
        total_platform_fee=Sum('platform_fee'),
    )
    return {
        'sales': list(latest),
        'total_sales': totals['total_sales'] or Decimal('0.00'),
        'total_commission': totals['total_commission'] or Decimal('0.00'),
        'total_platform_fee': totals['total_platform_fee'] or Decimal('0.00'),
    }


def settlements_overview() -> Dict:
    settlements = Settlement.objects.select_related('manufacturer', 'distributor').order_by('-created_at')
    sums = Settlement.objects.aggregate(
        pending=Sum('amount', filter=Q(status=SettlementStatus.PENDING)),
        completed=Sum('amount', filter=Q(status=SettlementStatus.COMPLETED)),
    )
    return {
        'settlements': list(settlements),
        'pending_total': sums['pending'] or Decimal('0.00'),
        'completed_total': sums['completed'] or Decimal('0.00'),
    }


@transaction.atomic
def process_settlement(settlement: Settlement) -> Settlement:
    """
    Mark a pending settlement as paid out.

    Raises:
        SettlementError: settlement not pending
    """
    if settlement.status != SettlementStatus.PENDING:
        metrics.settlements_processed_total.labels(result='rejected').inc()
        raise SettlementError('Only pending settlements can be processed.')

    settlement.status = SettlementStatus.COMPLETED
    settlement.processed_date = timezone.now()
    settlement.save(update_fields=['status', 'processed_date'])

    metrics.settlements_processed_total.labels(result='success').inc()
    log_domain_event(
        'settlement.processed',
        entity_type='Settlement',
        entity_id=str(settlement.id),
        settlement_type=settlement.settlement_type,
        amount=str(settlement.amount),
    )
    return settlement


def sample_orders_overview() -> Dict:
    month_start, now = _month_bounds()
    orders = SampleOrder.objects.select_related('distributor', 'product').order_by('-order_date')
    return {
        'sample_orders': list(orders),
        'pending_count': orders.filter(status=SampleOrderStatus.PENDING).count(),
        'shipped_count': orders.filter(status=SampleOrderStatus.SHIPPED).count(),
        'monthly_service_fee': SampleOrder.objects.filter(
            status__in=[
                SampleOrderStatus.PAID,
                SampleOrderStatus.PROCESSING,
                SampleOrderStatus.SHIPPED,
                SampleOrderStatus.DELIVERED,
            ],
            order_date__gte=month_start,
            order_date__lte=now,
        ).aggregate(total=Sum('service_fee'))['total'] or Decimal('0.00'),
    }


def approve_review(review: Review) -> Review:
    review.is_approved = True
    review.approved_at = timezone.now()
    review.save(update_fields=['is_approved', 'approved_at'])
    log_domain_event('review.approved', entity_type='Review', entity_id=str(review.id))
    return review
