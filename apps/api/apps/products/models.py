"""
Product models - manufacturer catalog and distributor shelf selections.
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


PRICE_MAX = Decimal('999999.99')
SHIPPING_FEE_MAX = Decimal('9999.99')


class Manufacturer(models.Model):
    """
    Manufacturer profile, one per manufacturer user.

    Created on first access of the manufacturer area.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='manufacturer_profile',
        verbose_name=_('User')
    )
    company_name = models.CharField(_('Company Name'), max_length=200)
    address = models.CharField(_('Address'), max_length=500, blank=True)
    phone = models.CharField(_('Phone'), max_length=50, blank=True)
    company_description = models.TextField(_('Description'), max_length=2000, blank=True)
    industry = models.CharField(_('Industry'), max_length=100, blank=True)
    website = models.URLField(_('Website'), max_length=255, blank=True)
    established_year = models.PositiveIntegerField(_('Established Year'), null=True, blank=True)
    is_active = models.BooleanField(_('Active'), default=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)

    class Meta:
        db_table = 'manufacturer'
        ordering = ['company_name']
        verbose_name = _('Manufacturer')
        verbose_name_plural = _('Manufacturers')

    def __str__(self):
        return self.company_name


class Product(models.Model):
    """
    Product offered by a manufacturer to distributors.
    """
    manufacturer = models.ForeignKey(
        Manufacturer,
        on_delete=models.CASCADE,
        related_name='products',
        verbose_name=_('Manufacturer')
    )

    # Basic info
    name = models.CharField(_('Name'), max_length=200)
    description = models.TextField(_('Description'), max_length=1000, blank=True)
    category = models.CharField(_('Category'), max_length=100, blank=True)
    image_url = models.CharField(_('Image URL'), max_length=500, blank=True)

    # Pricing
    wholesale_price = models.DecimalField(
        _('Wholesale Price'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(PRICE_MAX)]
    )
    retail_price = models.DecimalField(
        _('Retail Price'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(PRICE_MAX)]
    )
    free_shipping_threshold = models.DecimalField(
        _('Free Shipping Threshold'),
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(PRICE_MAX)]
    )
    shipping_fee = models.DecimalField(
        _('Shipping Fee'),
        max_digits=8,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(SHIPPING_FEE_MAX)]
    )

    # Handling
    requires_refrigeration = models.BooleanField(_('Requires Refrigeration'), default=False)
    requires_freezing = models.BooleanField(_('Requires Freezing'), default=False)

    # Inventory
    stock_quantity = models.PositiveIntegerField(_('Stock Quantity'), default=0)
    minimum_order_quantity = models.PositiveIntegerField(
        _('Minimum Order Quantity'),
        default=1,
        validators=[MinValueValidator(1)]
    )

    is_active = models.BooleanField(_('Active'), default=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)

    class Meta:
        db_table = 'product'
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='idx_product_name'),
            models.Index(fields=['category'], name='idx_product_category'),
            models.Index(fields=['manufacturer', 'is_active'], name='idx_product_manufacturer'),
        ]
        verbose_name = _('Product')
        verbose_name_plural = _('Products')

    def __str__(self):
        return self.name

    @property
    def is_in_stock(self):
        return self.stock_quantity > 0


class DistributorProduct(models.Model):
    """
    Product chosen by a distributor for its shelf.

    Removal is soft: ``is_active`` goes False and ``removed_at`` is set, so
    re-adding the product reactivates the same row.
    """
    distributor = models.ForeignKey(
        'distributors.Distributor',
        on_delete=models.CASCADE,
        related_name='distributor_products',
        verbose_name=_('Distributor')
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='distributor_products',
        verbose_name=_('Product')
    )
    is_active = models.BooleanField(_('Active'), default=True)
    assigned_at = models.DateTimeField(_('Assigned At'), auto_now_add=True)
    removed_at = models.DateTimeField(_('Removed At'), null=True, blank=True)

    class Meta:
        db_table = 'distributor_product'
        ordering = ['-assigned_at']
        constraints = [
            models.UniqueConstraint(
                fields=['distributor', 'product'],
                name='uniq_distributor_product'
            ),
        ]
        verbose_name = _('Distributor Product')
        verbose_name_plural = _('Distributor Products')

    def __str__(self):
        return f"{self.distributor_id} -> {self.product_id}"


class Review(models.Model):
    """Consumer review of a product, visible once approved by an admin."""
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='reviews',
        verbose_name=_('Product')
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews',
        verbose_name=_('User')
    )
    rating = models.PositiveSmallIntegerField(
        _('Rating'),
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(_('Comment'), max_length=1000, blank=True)
    is_approved = models.BooleanField(_('Approved'), default=False)
    approved_at = models.DateTimeField(_('Approved At'), null=True, blank=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)

    class Meta:
        db_table = 'review'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                name='review_rating_range'
            ),
        ]
        verbose_name = _('Review')
        verbose_name_plural = _('Reviews')

    def __str__(self):
        return f"{self.product_id} {self.rating}/5"
