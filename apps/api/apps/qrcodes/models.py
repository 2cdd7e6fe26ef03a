"""
QR code models - one storefront code per distributor location.
"""
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def generate_qr_code_value():
    """8 uppercase hex characters taken from a random UUID."""
    return uuid.uuid4().hex[:8].upper()


class QRCode(models.Model):
    """
    Storefront QR code of a distributor location.

    A location owns at most one code (active or not). Deleting the code
    removes its product assignments.
    """
    distributor = models.OneToOneField(
        'distributors.Distributor',
        on_delete=models.CASCADE,
        related_name='qr_code',
        verbose_name=_('Distributor')
    )
    code = models.CharField(_('Code'), max_length=20, unique=True, default=generate_qr_code_value)
    location = models.CharField(_('Location'), max_length=200)
    qr_code_image_url = models.CharField(_('Image URL'), max_length=500, blank=True)
    is_active = models.BooleanField(_('Active'), default=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    deactivated_at = models.DateTimeField(_('Deactivated At'), null=True, blank=True)

    class Meta:
        db_table = 'qr_code'
        ordering = ['-created_at']
        verbose_name = _('QR Code')
        verbose_name_plural = _('QR Codes')

    def __str__(self):
        return f"{self.code} ({self.location})"


class QRCodeProduct(models.Model):
    """
    Product displayed on a QR storefront.

    Soft removal like DistributorProduct; ``display_order`` sorts the
    storefront listing.
    """
    qr_code = models.ForeignKey(
        QRCode,
        on_delete=models.CASCADE,
        related_name='qr_code_products',
        verbose_name=_('QR Code')
    )
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='qr_code_products',
        verbose_name=_('Product')
    )
    is_active = models.BooleanField(_('Active'), default=True)
    display_order = models.PositiveIntegerField(_('Display Order'), default=0)
    assigned_at = models.DateTimeField(_('Assigned At'), auto_now_add=True)
    removed_at = models.DateTimeField(_('Removed At'), null=True, blank=True)
    notes = models.CharField(_('Notes'), max_length=500, blank=True)

    class Meta:
        db_table = 'qr_code_product'
        ordering = ['display_order', 'assigned_at']
        constraints = [
            models.UniqueConstraint(
                fields=['qr_code', 'product'],
                name='uniq_qr_code_product'
            ),
        ]
        verbose_name = _('QR Code Product')
        verbose_name_plural = _('QR Code Products')

    def __str__(self):
        return f"{self.qr_code_id} -> {self.product_id}"
