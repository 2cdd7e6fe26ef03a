"""
Authz serializers: registration, profile and token login.
"""
from django.contrib.auth.password_validation import validate_password
from django.utils import timezone
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from apps.authz.models import User, RoleChoices


def issue_tokens(user):
    """Return a fresh access/refresh pair for ``user``."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


class UserProfileSerializer(serializers.ModelSerializer):
    """Current user profile."""
    display_name = serializers.ReadOnlyField()
    home = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'first_name',
            'last_name',
            'role',
            'company_name',
            'display_name',
            'home',
            'is_active',
            'last_login_at',
            'created_at',
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """
    Self-service registration.

    Admin accounts cannot be created here (see AdminCreateSerializer).
    """
    SELF_SERVICE_ROLES = (
        RoleChoices.CONSUMER,
        RoleChoices.DISTRIBUTOR,
        RoleChoices.MANUFACTURER,
    )

    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True, min_length=8, max_length=100)
    password_confirm = serializers.CharField(write_only=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=RoleChoices.choices, default=RoleChoices.CONSUMER)
    company_name = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_email(self, value):
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('A user with this email already exists.')
        return value

    def validate_role(self, value):
        if value not in self.SELF_SERVICE_ROLES:
            raise serializers.ValidationError('This role cannot be self-registered.')
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match.'
            })
        validate_password(attrs['password'])

        role = attrs.get('role', RoleChoices.CONSUMER)
        if role in (RoleChoices.DISTRIBUTOR, RoleChoices.MANUFACTURER) and not attrs.get('company_name'):
            raise serializers.ValidationError({
                'company_name': 'Company name is required for business accounts.'
            })
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)


class AdminCreateSerializer(serializers.Serializer):
    """Create an administrator account."""
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True, min_length=8, max_length=100)
    password_confirm = serializers.CharField(write_only=True)
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)

    def validate_email(self, value):
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('A user with this email already exists.')
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match.'
            })
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        return User.objects.create_user(
            password=password,
            role=RoleChoices.ADMIN,
            is_staff=True,
            **validated_data
        )


class ShelfTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token login that records the login time and returns the user's role."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)

        self.user.last_login_at = timezone.now()
        self.user.save(update_fields=['last_login_at'])

        data['role'] = self.user.role
        data['display_name'] = self.user.display_name
        data['home'] = self.user.home
        return data
