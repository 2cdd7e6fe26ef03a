"""Sales models - storefront orders, sales ledger and payouts."""
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class OrderStatus(models.TextChoices):
    """
    Order status.

    Checkout creates orders as paid; manufacturers then move them through
    processing -> shipped -> delivered, or cancel/refund them.
    """
    PENDING = 'pending', _('Pending')
    PAID = 'paid', _('Paid')
    PROCESSING = 'processing', _('Processing')
    SHIPPED = 'shipped', _('Shipped')
    DELIVERED = 'delivered', _('Delivered')
    CANCELLED = 'cancelled', _('Cancelled')
    REFUNDED = 'refunded', _('Refunded')


class SettlementType(models.TextChoices):
    MANUFACTURER_SALES = 'manufacturer_sales', _('Manufacturer Sales')
    DISTRIBUTOR_COMMISSION = 'distributor_commission', _('Distributor Commission')


class SettlementStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    PROCESSING = 'processing', _('Processing')
    COMPLETED = 'completed', _('Completed')
    FAILED = 'failed', _('Failed')


class SampleOrderType(models.TextChoices):
    MONTHLY = 'monthly', _('Monthly')
    ADDITIONAL = 'additional', _('Additional')


class SampleOrderStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    PAID = 'paid', _('Paid')
    PROCESSING = 'processing', _('Processing')
    SHIPPED = 'shipped', _('Shipped')
    DELIVERED = 'delivered', _('Delivered')
    CANCELLED = 'cancelled', _('Cancelled')


def generate_order_number():
    return f"ORD-{timezone.now():%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


class Order(models.Model):
    """
    Consumer order placed from a QR storefront.

    The distributor reference is cleared when the location is removed;
    the order itself is kept.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='orders',
        verbose_name=_('Customer')
    )
    distributor = models.ForeignKey(
        'distributors.Distributor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
        verbose_name=_('Distributor')
    )
    order_number = models.CharField(
        _('Order Number'),
        max_length=50,
        unique=True,
        default=generate_order_number
    )
    total_amount = models.DecimalField(_('Total'), max_digits=12, decimal_places=2, default=Decimal('0.00'))
    shipping_fee = models.DecimalField(_('Shipping Fee'), max_digits=10, decimal_places=2, default=Decimal('0.00'))
    payment_fee = models.DecimalField(_('Payment Fee'), max_digits=10, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(
        _('Status'),
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )
    payment_intent_id = models.CharField(_('Payment Intent'), max_length=255, blank=True)

    # Shipping
    shipping_name = models.CharField(_('Shipping Name'), max_length=200, blank=True)
    shipping_address = models.CharField(_('Shipping Address'), max_length=500, blank=True)
    shipping_phone = models.CharField(_('Shipping Phone'), max_length=50, blank=True)
    tracking_number = models.CharField(_('Tracking Number'), max_length=100, blank=True)

    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)
    shipped_at = models.DateTimeField(_('Shipped At'), null=True, blank=True)
    delivered_at = models.DateTimeField(_('Delivered At'), null=True, blank=True)
    cancelled_at = models.DateTimeField(_('Cancelled At'), null=True, blank=True)

    class Meta:
        db_table = 'customer_order'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_order_status'),
            models.Index(fields=['created_at'], name='idx_order_created'),
        ]
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')

    def __str__(self):
        return self.order_number


class OrderItem(models.Model):
    """Line of an order; prices are frozen at checkout."""
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Order')
    )
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='order_items',
        verbose_name=_('Product')
    )
    quantity = models.PositiveIntegerField(_('Quantity'))
    unit_price = models.DecimalField(_('Unit Price'), max_digits=10, decimal_places=2)
    total_price = models.DecimalField(_('Total Price'), max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'order_item'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='order_item_quantity_positive'
            ),
        ]
        verbose_name = _('Order Item')
        verbose_name_plural = _('Order Items')

    def __str__(self):
        return f"{self.order_id}: {self.product_id} x{self.quantity}"


class Sale(models.Model):
    """
    Sales ledger entry for a storefront order.

    ``distributor`` is nullable so history survives distributor removal.
    """
    order = models.ForeignKey(
        Order,
        on_delete=models.PROTECT,
        related_name='sales',
        verbose_name=_('Order')
    )
    distributor = models.ForeignKey(
        'distributors.Distributor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales',
        verbose_name=_('Distributor')
    )
    qr_code = models.ForeignKey(
        'qrcodes.QRCode',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales',
        verbose_name=_('QR Code')
    )
    total_amount = models.DecimalField(_('Total'), max_digits=12, decimal_places=2)
    distributor_commission = models.DecimalField(_('Distributor Commission'), max_digits=12, decimal_places=2)
    platform_fee = models.DecimalField(_('Platform Fee'), max_digits=12, decimal_places=2)
    sale_date = models.DateTimeField(_('Sale Date'), default=timezone.now)
    is_settled = models.BooleanField(_('Settled'), default=False)
    settlement_date = models.DateTimeField(_('Settlement Date'), null=True, blank=True)

    class Meta:
        db_table = 'sale'
        ordering = ['-sale_date']
        indexes = [
            models.Index(fields=['sale_date'], name='idx_sale_date'),
            models.Index(fields=['distributor', 'sale_date'], name='idx_sale_distributor'),
        ]
        verbose_name = _('Sale')
        verbose_name_plural = _('Sales')

    def __str__(self):
        return f"Sale {self.pk} ({self.total_amount})"


class Settlement(models.Model):
    """Payout to a manufacturer (sales) or a distributor (commission)."""
    manufacturer = models.ForeignKey(
        'products.Manufacturer',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='settlements',
        verbose_name=_('Manufacturer')
    )
    distributor = models.ForeignKey(
        'distributors.Distributor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='settlements',
        verbose_name=_('Distributor')
    )
    amount = models.DecimalField(_('Amount'), max_digits=12, decimal_places=2)
    settlement_type = models.CharField(
        _('Type'),
        max_length=30,
        choices=SettlementType.choices
    )
    period_start = models.DateTimeField(_('Period Start'))
    period_end = models.DateTimeField(_('Period End'))
    status = models.CharField(
        _('Status'),
        max_length=20,
        choices=SettlementStatus.choices,
        default=SettlementStatus.PENDING
    )
    processed_date = models.DateTimeField(_('Processed At'), null=True, blank=True)
    notes = models.CharField(_('Notes'), max_length=500, blank=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)

    class Meta:
        db_table = 'settlement'
        ordering = ['-created_at']
        verbose_name = _('Settlement')
        verbose_name_plural = _('Settlements')

    def __str__(self):
        return f"{self.get_settlement_type_display()} {self.amount} ({self.status})"


class SampleOrder(models.Model):
    """Product samples shipped to a distributor shelf."""
    distributor = models.ForeignKey(
        'distributors.Distributor',
        on_delete=models.CASCADE,
        related_name='sample_orders',
        verbose_name=_('Distributor')
    )
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='sample_orders',
        verbose_name=_('Product')
    )
    quantity = models.PositiveIntegerField(_('Quantity'), default=1)
    cost = models.DecimalField(_('Cost'), max_digits=10, decimal_places=2, default=Decimal('0.00'))
    shipping_fee = models.DecimalField(_('Shipping Fee'), max_digits=10, decimal_places=2, default=Decimal('0.00'))
    service_fee = models.DecimalField(_('Service Fee'), max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(_('Total'), max_digits=12, decimal_places=2, default=Decimal('0.00'))
    order_type = models.CharField(
        _('Order Type'),
        max_length=20,
        choices=SampleOrderType.choices,
        default=SampleOrderType.MONTHLY
    )
    status = models.CharField(
        _('Status'),
        max_length=20,
        choices=SampleOrderStatus.choices,
        default=SampleOrderStatus.PENDING
    )
    order_date = models.DateTimeField(_('Order Date'), default=timezone.now)
    shipped_date = models.DateTimeField(_('Shipped At'), null=True, blank=True)
    delivered_date = models.DateTimeField(_('Delivered At'), null=True, blank=True)
    tracking_number = models.CharField(_('Tracking Number'), max_length=100, blank=True)

    class Meta:
        db_table = 'sample_order'
        ordering = ['-order_date']
        verbose_name = _('Sample Order')
        verbose_name_plural = _('Sample Orders')

    def __str__(self):
        return f"Sample {self.pk} ({self.get_order_type_display()})"

    def save(self, *args, **kwargs):
        self.total_amount = (self.cost or 0) + (self.shipping_fee or 0) + (self.service_fee or 0)
        super().save(*args, **kwargs)
