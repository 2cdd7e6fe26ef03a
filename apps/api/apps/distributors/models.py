"""
Distributor models - companies, shelf locations and their contracts.
"""
import calendar
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


def add_months(value, months):
    """Shift a datetime by whole months, clamping the day (Jan 31 + 1 -> Feb 28/29)."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


class CompanyType(models.TextChoices):
    INDIVIDUAL = 'individual', _('Individual')
    CHAIN = 'chain', _('Chain')


class DistributorType(models.TextChoices):
    """
    - INDIVIDUAL: standalone store
    - HEAD_OFFICE: chain headquarters, manages every store of its company
    - STORE: chain location that joined with the head office code
    """
    INDIVIDUAL = 'individual', _('Individual')
    HEAD_OFFICE = 'head_office', _('Head Office')
    STORE = 'store', _('Store')


class ContractStatus(models.TextChoices):
    """
    Contract status with state machine.

    Transitions:
    - active -> cancellation_requested (after one year)
    - cancellation_requested -> active (extension)
    - cancellation_requested -> pending_shelf_return (shelf returned)
    - pending_shelf_return -> records removed by an admin
    - suspended: set manually by admins
    """
    ACTIVE = 'active', _('Active')
    CANCELLATION_REQUESTED = 'cancellation_requested', _('Cancellation Requested')
    PENDING_SHELF_RETURN = 'pending_shelf_return', _('Pending Shelf Return')
    CANCELLED = 'cancelled', _('Cancelled')
    SUSPENDED = 'suspended', _('Suspended')


class ShelfReturnStatus(models.TextChoices):
    NOT_REQUIRED = 'not_required', _('Not Required')
    SCHEDULED = 'scheduled', _('Scheduled')
    OVERDUE = 'overdue', _('Overdue')
    COMPLETED = 'completed', _('Completed')


class SubscriptionStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    PAID = 'paid', _('Paid')
    FAILED = 'failed', _('Failed')
    CANCELLED = 'cancelled', _('Cancelled')


class Company(models.Model):
    """
    Company owning one or more distributor locations.

    An individual company has a single location. A chain company has one
    head office and any number of stores joined via ``head_office_code``.
    """
    company_name = models.CharField(_('Company Name'), max_length=200)
    headquarters_address = models.CharField(_('Headquarters Address'), max_length=500, blank=True)
    phone = models.CharField(_('Phone'), max_length=50, blank=True)
    email = models.EmailField(_('Email'), max_length=255, blank=True)
    company_type = models.CharField(
        _('Company Type'),
        max_length=20,
        choices=CompanyType.choices,
        default=CompanyType.INDIVIDUAL
    )
    head_office_code = models.CharField(
        _('Head Office Code'),
        max_length=8,
        unique=True,
        null=True,
        blank=True,
        help_text=_('8-digit code shared with stores joining this company')
    )
    owner_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='owned_companies',
        verbose_name=_('Owner')
    )
    is_active = models.BooleanField(_('Active'), default=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)

    class Meta:
        db_table = 'company'
        ordering = ['company_name']
        verbose_name = _('Company')
        verbose_name_plural = _('Companies')

    def __str__(self):
        return self.company_name

    @property
    def is_chain(self):
        return self.company_type == CompanyType.CHAIN


class Distributor(models.Model):
    """
    A shelf location under contract.

    Business Rules:
    - cancellation can be requested only one year after contract start
    - a requested cancellation opens a shelf return window
    - a head office sees every active location of its company
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='distributors',
        verbose_name=_('User')
    )
    company_name = models.CharField(_('Company Name'), max_length=200)
    address = models.CharField(_('Address'), max_length=500, blank=True)
    phone = models.CharField(_('Phone'), max_length=50, blank=True)
    location_name = models.CharField(_('Location Name'), max_length=200, blank=True)
    is_headquarters = models.BooleanField(_('Headquarters'), default=False)

    company = models.ForeignKey(
        Company,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='distributors',
        verbose_name=_('Company')
    )
    distributor_type = models.CharField(
        _('Distributor Type'),
        max_length=20,
        choices=DistributorType.choices,
        default=DistributorType.INDIVIDUAL
    )
    parent_distributor = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='child_distributors',
        verbose_name=_('Parent Distributor')
    )

    # Shelf plan
    shelf_count = models.PositiveIntegerField(_('Shelf Count'), default=1)
    product_selection_count = models.PositiveIntegerField(_('Product Selection Count'), default=5)
    monthly_fee = models.DecimalField(
        _('Monthly Fee'),
        max_digits=10,
        decimal_places=2,
        default=Decimal('3980.00')
    )

    # Contract
    contract_start_date = models.DateTimeField(_('Contract Start'), default=timezone.now)
    contract_end_date = models.DateTimeField(_('Contract End'), null=True, blank=True)
    cancellation_request_date = models.DateTimeField(_('Cancellation Requested At'), null=True, blank=True)
    shelf_return_due_date = models.DateTimeField(_('Shelf Return Due'), null=True, blank=True)
    shelf_returned_date = models.DateTimeField(_('Shelf Returned At'), null=True, blank=True)
    shelf_return_status = models.CharField(
        _('Shelf Return Status'),
        max_length=20,
        choices=ShelfReturnStatus.choices,
        default=ShelfReturnStatus.NOT_REQUIRED
    )
    contract_status = models.CharField(
        _('Contract Status'),
        max_length=30,
        choices=ContractStatus.choices,
        default=ContractStatus.ACTIVE
    )

    is_active = models.BooleanField(_('Active'), default=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)

    class Meta:
        db_table = 'distributor'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['user', 'is_active'], name='idx_distributor_user_active'),
            models.Index(fields=['company', 'is_active'], name='idx_distributor_company'),
            models.Index(fields=['contract_status'], name='idx_distributor_contract'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(monthly_fee__gte=0),
                name='distributor_monthly_fee_non_negative'
            ),
        ]
        verbose_name = _('Distributor')
        verbose_name_plural = _('Distributors')

    def __str__(self):
        if self.location_name:
            return f"{self.company_name} / {self.location_name}"
        return self.company_name

    @property
    def is_chain_head_office(self):
        return (
            self.distributor_type == DistributorType.HEAD_OFFICE
            and self.company is not None
            and self.company.is_chain
        )

    @property
    def is_chain_store(self):
        return (
            self.distributor_type == DistributorType.STORE
            and self.company is not None
            and self.company.is_chain
        )

    @property
    def contract_maturity_date(self):
        """Earliest moment a cancellation may be requested."""
        return add_months(self.contract_start_date, 12)

    @property
    def can_cancel_contract(self):
        return (
            self.contract_status == ContractStatus.ACTIVE
            and timezone.now() >= self.contract_maturity_date
        )

    def company_locations(self):
        """Active distributors of the same company (including self)."""
        if self.company_id is None:
            return Distributor.objects.filter(pk=self.pk, is_active=True)
        return Distributor.objects.filter(company_id=self.company_id, is_active=True)

    @property
    def effective_shelf_count(self):
        if self.is_chain_head_office:
            return self.company_locations().count()
        return 1

    @property
    def effective_product_selection_count(self):
        if self.is_chain_head_office:
            return self.company_locations().count() * self.product_selection_count
        return self.product_selection_count


class DistributorSubscription(models.Model):
    """Monthly shelf fee billing record."""
    distributor = models.ForeignKey(
        Distributor,
        on_delete=models.CASCADE,
        related_name='subscriptions',
        verbose_name=_('Distributor')
    )
    amount = models.DecimalField(_('Amount'), max_digits=10, decimal_places=2)
    billing_date = models.DateTimeField(_('Billing Date'))
    paid_date = models.DateTimeField(_('Paid Date'), null=True, blank=True)
    status = models.CharField(
        _('Status'),
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.PENDING
    )
    payment_intent_id = models.CharField(_('Payment Intent'), max_length=255, blank=True)
    failure_reason = models.CharField(_('Failure Reason'), max_length=500, blank=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)

    class Meta:
        db_table = 'distributor_subscription'
        ordering = ['-billing_date']
        verbose_name = _('Distributor Subscription')
        verbose_name_plural = _('Distributor Subscriptions')

    def __str__(self):
        return f"{self.distributor} {self.billing_date:%Y-%m} {self.status}"
