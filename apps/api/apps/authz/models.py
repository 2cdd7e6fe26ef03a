"""
Authz models: auth_user with a single marketplace role.
"""
import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin


# ============================================================================
# Enums
# ============================================================================

class RoleChoices(models.TextChoices):
    """
    Marketplace roles. Every user has exactly one.

    - CONSUMER: buys from QR storefronts
    - DISTRIBUTOR: hosts shelves (individual store, chain head office or store)
    - MANUFACTURER: supplies products
    - ADMIN: platform operator
    """
    CONSUMER = 'consumer', 'Consumer'
    DISTRIBUTOR = 'distributor', 'Distributor'
    MANUFACTURER = 'manufacturer', 'Manufacturer'
    ADMIN = 'admin', 'Admin'


# Landing area per role, returned after login/registration
ROLE_HOME = {
    RoleChoices.CONSUMER: 'shop',
    RoleChoices.DISTRIBUTOR: 'distributor',
    RoleChoices.MANUFACTURER: 'manufacturer',
    RoleChoices.ADMIN: 'admin',
}


# ============================================================================
# User Management
# ============================================================================

class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', RoleChoices.ADMIN)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model for authentication.

    Fields:
    - id: UUID PK
    - email: unique, login identifier
    - first_name, last_name
    - role: consumer|distributor|manufacturer|admin
    - company_name: company entered at registration (distributors/manufacturers)
    - is_active: False once a contract is fully cancelled (account locked)
    - last_login_at: set on every successful token login
    - created_at, updated_at
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.CONSUMER
    )
    company_name = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Required for Django admin access
    last_login_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'auth_user'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['email'], name='idx_user_email'),
            models.Index(fields=['role'], name='idx_user_role'),
        ]

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.role == RoleChoices.ADMIN

    @property
    def home(self):
        return ROLE_HOME.get(self.role, 'shop')

    @property
    def display_name(self):
        """
        Name shown in the navigation bar.

        Chain stores are known by their location name, other distributors by
        their company name; manufacturers by their company name.
        """
        if self.role == RoleChoices.DISTRIBUTOR:
            distributor = (
                self.distributors.filter(is_active=True)
                .select_related('company')
                .order_by('created_at')
                .first()
            )
            if distributor is not None:
                if distributor.is_chain_store and distributor.location_name:
                    return distributor.location_name
                return distributor.company_name
            return self.company_name or self.email

        if self.role == RoleChoices.MANUFACTURER:
            profile = getattr(self, 'manufacturer_profile', None)
            if profile is not None and profile.company_name:
                return profile.company_name
            return self.company_name or self.email

        if self.role == RoleChoices.ADMIN:
            return 'Admin'

        return self.email
