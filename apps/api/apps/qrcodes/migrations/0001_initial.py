# Initial migration for qrcodes app

import django.db.models.deletion
from django.db import migrations, models

import apps.qrcodes.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('distributors', '0001_initial'),
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='QRCode',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(default=apps.qrcodes.models.generate_qr_code_value, max_length=20, unique=True)),
                ('location', models.CharField(max_length=200)),
                ('qr_code_image_url', models.CharField(blank=True, max_length=500)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('deactivated_at', models.DateTimeField(blank=True, null=True)),
                ('distributor', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='qr_code', to='distributors.distributor')),
            ],
            options={
                'verbose_name': 'QR Code',
                'verbose_name_plural': 'QR Codes',
                'db_table': 'qr_code',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='QRCodeProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_active', models.BooleanField(default=True)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('assigned_at', models.DateTimeField(auto_now_add=True)),
                ('removed_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.CharField(blank=True, max_length=500)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='qr_code_products', to='products.product')),
                ('qr_code', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='qr_code_products', to='qrcodes.qrcode')),
            ],
            options={
                'verbose_name': 'QR Code Product',
                'verbose_name_plural': 'QR Code Products',
                'db_table': 'qr_code_product',
                'ordering': ['display_order', 'assigned_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='qrcodeproduct',
            constraint=models.UniqueConstraint(fields=('qr_code', 'product'), name='uniq_qr_code_product'),
        ),
    ]
