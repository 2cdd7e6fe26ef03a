# Initial migration for distributors app

from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Company',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(max_length=200)),
                ('headquarters_address', models.CharField(blank=True, max_length=500)),
                ('phone', models.CharField(blank=True, max_length=50)),
                ('email', models.EmailField(blank=True, max_length=255)),
                ('company_type', models.CharField(
                    choices=[('individual', 'Individual'), ('chain', 'Chain')],
                    default='individual',
                    max_length=20
                )),
                ('head_office_code', models.CharField(blank=True, help_text='8-digit code shared with stores joining this company', max_length=8, null=True, unique=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner_user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='owned_companies', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Company',
                'verbose_name_plural': 'Companies',
                'db_table': 'company',
                'ordering': ['company_name'],
            },
        ),
        migrations.CreateModel(
            name='Distributor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(max_length=200)),
                ('address', models.CharField(blank=True, max_length=500)),
                ('phone', models.CharField(blank=True, max_length=50)),
                ('location_name', models.CharField(blank=True, max_length=200)),
                ('is_headquarters', models.BooleanField(default=False)),
                ('distributor_type', models.CharField(
                    choices=[('individual', 'Individual'), ('head_office', 'Head Office'), ('store', 'Store')],
                    default='individual',
                    max_length=20
                )),
                ('shelf_count', models.PositiveIntegerField(default=1)),
                ('product_selection_count', models.PositiveIntegerField(default=5)),
                ('monthly_fee', models.DecimalField(decimal_places=2, default=Decimal('3980.00'), max_digits=10)),
                ('contract_start_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('contract_end_date', models.DateTimeField(blank=True, null=True)),
                ('cancellation_request_date', models.DateTimeField(blank=True, null=True)),
                ('shelf_return_due_date', models.DateTimeField(blank=True, null=True)),
                ('shelf_returned_date', models.DateTimeField(blank=True, null=True)),
                ('shelf_return_status', models.CharField(
                    choices=[
                        ('not_required', 'Not Required'),
                        ('scheduled', 'Scheduled'),
                        ('overdue', 'Overdue'),
                        ('completed', 'Completed'),
                    ],
                    default='not_required',
                    max_length=20
                )),
                ('contract_status', models.CharField(
                    choices=[
                        ('active', 'Active'),
                        ('cancellation_requested', 'Cancellation Requested'),
                        ('pending_shelf_return', 'Pending Shelf Return'),
                        ('cancelled', 'Cancelled'),
                        ('suspended', 'Suspended'),
                    ],
                    default='active',
                    max_length=30
                )),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='distributors', to='distributors.company')),
                ('parent_distributor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='child_distributors', to='distributors.distributor')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='distributors', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Distributor',
                'verbose_name_plural': 'Distributors',
                'db_table': 'distributor',
                'ordering': ['created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='distributor',
            index=models.Index(fields=['user', 'is_active'], name='idx_distributor_user_active'),
        ),
        migrations.AddIndex(
            model_name='distributor',
            index=models.Index(fields=['company', 'is_active'], name='idx_distributor_company'),
        ),
        migrations.AddIndex(
            model_name='distributor',
            index=models.Index(fields=['contract_status'], name='idx_distributor_contract'),
        ),
        migrations.AddConstraint(
            model_name='distributor',
            constraint=models.CheckConstraint(condition=models.Q(('monthly_fee__gte', 0)), name='distributor_monthly_fee_non_negative'),
        ),
        migrations.CreateModel(
            name='DistributorSubscription',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('billing_date', models.DateTimeField()),
                ('paid_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(
                    choices=[('pending', 'Pending'), ('paid', 'Paid'), ('failed', 'Failed'), ('cancelled', 'Cancelled')],
                    default='pending',
                    max_length=20
                )),
                ('payment_intent_id', models.CharField(blank=True, max_length=255)),
                ('failure_reason', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('distributor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='subscriptions', to='distributors.distributor')),
            ],
            options={
                'verbose_name': 'Distributor Subscription',
                'verbose_name_plural': 'Distributor Subscriptions',
                'db_table': 'distributor_subscription',
                'ordering': ['-billing_date'],
            },
        ),
    ]
