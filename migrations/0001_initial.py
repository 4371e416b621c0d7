"""
Initial migration for Stockledger models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stockledger models: Product, StockMovement, StockAdjustment,
    QuotationReservation, Purchase, LowStockAlert."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('sku', models.CharField(blank=True, db_index=True, default='', max_length=64, verbose_name='SKU')),
                ('category', models.CharField(choices=[('cctv_camera', 'CCTV camera'), ('dvr', 'DVR'), ('nvr', 'NVR'), ('hdd', 'Hard disk'), ('other', 'Other')], default='other', max_length=20, verbose_name='Category')),
                ('specifications', models.JSONField(blank=True, default=dict, help_text='Typed per category, see stockledger.specs', verbose_name='Specifications')),
                ('selling_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Selling price')),
                ('last_purchase_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='Last purchase price')),
                ('stock_quantity', models.PositiveIntegerField(default=0, verbose_name='On hand')),
                ('reserved_stock', models.PositiveIntegerField(default=0, verbose_name='Reserved')),
                ('minimum_stock_level', models.PositiveIntegerField(default=5, verbose_name='Minimum stock level')),
                ('reorder_quantity', models.PositiveIntegerField(default=10, verbose_name='Reorder quantity')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action_type', models.CharField(choices=[('purchase', 'Purchase'), ('sale', 'Sale'), ('adjustment', 'Adjustment'), ('transfer', 'Transfer'), ('return', 'Return'), ('quotation_reserved', 'Quotation reserved'), ('quotation_released', 'Quotation released')], max_length=32, verbose_name='Action')),
                ('quantity_change', models.IntegerField(help_text='Positive = in, negative = out, zero = audit only', verbose_name='Change')),
                ('quantity_before', models.IntegerField(verbose_name='Before')),
                ('quantity_after', models.IntegerField(verbose_name='After')),
                ('reason', models.CharField(blank=True, default='', max_length=255, verbose_name='Reason')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('reference_type', models.CharField(blank=True, default='', max_length=32, verbose_name='Reference type')),
                ('reference_id', models.CharField(blank=True, default='', max_length=64, verbose_name='Reference id')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created at')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='stockledger.product', verbose_name='Product')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Stock movement',
                'verbose_name_plural': 'Stock movements',
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(fields=['product', 'created_at'], name='sl_movement_product_created'),
                    models.Index(fields=['action_type'], name='sl_movement_action_type'),
                    models.Index(fields=['reference_type', 'reference_id'], name='sl_movement_reference'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockAdjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('adjustment_type', models.CharField(choices=[('add', 'Add stock (+)'), ('remove', 'Remove stock (-)')], max_length=10, verbose_name='Type')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('reason', models.CharField(choices=[('damage', 'Damage'), ('loss', 'Loss'), ('correction', 'Correction'), ('expired', 'Expired'), ('found', 'Found/Recovered'), ('initial_stock', 'Initial stock'), ('other', 'Other')], max_length=20, verbose_name='Reason')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('serial_numbers', models.JSONField(blank=True, default=list, verbose_name='Serial numbers')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('adjusted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Adjusted by')),
                ('movement', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='adjustment', to='stockledger.stockmovement', verbose_name='Movement')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='adjustments', to='stockledger.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Stock adjustment',
                'verbose_name_plural': 'Stock adjustments',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='QuotationReservation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quotation_id', models.CharField(db_index=True, max_length=64, verbose_name='Quotation')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('status', models.CharField(choices=[('reserved', 'Reserved'), ('released', 'Released')], db_index=True, default='reserved', max_length=20, verbose_name='Status')),
                ('reserved_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Reserved at')),
                ('released_at', models.DateTimeField(blank=True, null=True, verbose_name='Released at')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='reservations', to='stockledger.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Quotation reservation',
                'verbose_name_plural': 'Quotation reservations',
                'ordering': ['-reserved_at'],
                'indexes': [
                    models.Index(fields=['product', 'status'], name='sl_reservation_product_status'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'reserved')), fields=('quotation_id', 'product'), name='unique_active_quotation_reservation'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Purchase',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('purchase_number', models.CharField(max_length=32, unique=True, verbose_name='Purchase number')),
                ('vendor_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Vendor')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('unit_cost', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Unit cost')),
                ('gst_rate', models.DecimalField(decimal_places=2, default=Decimal('18'), max_digits=5, verbose_name='GST %')),
                ('gst_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14, verbose_name='GST amount')),
                ('total_cost', models.DecimalField(decimal_places=2, max_digits=14, verbose_name='Total cost')),
                ('invoice_number', models.CharField(blank=True, default='', max_length=64, verbose_name='Invoice number')),
                ('invoice_date', models.DateField(blank=True, null=True, verbose_name='Invoice date')),
                ('purchase_date', models.DateField(blank=True, null=True, verbose_name='Purchase date')),
                ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('partial', 'Partial'), ('paid', 'Paid')], default='pending', max_length=10, verbose_name='Payment status')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchases', to='stockledger.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Purchase',
                'verbose_name_plural': 'Purchases',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='LowStockAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('alert_type', models.CharField(choices=[('low_stock', 'Low stock'), ('out_of_stock', 'Out of stock')], default='low_stock', max_length=20, verbose_name='Type')),
                ('current_stock', models.IntegerField(help_text='Available quantity when the alert was raised', verbose_name='Available')),
                ('minimum_level', models.PositiveIntegerField(verbose_name='Minimum level')),
                ('is_acknowledged', models.BooleanField(default=False, verbose_name='Acknowledged')),
                ('acknowledged_at', models.DateTimeField(blank=True, null=True, verbose_name='Acknowledged at')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('acknowledged_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Acknowledged by')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_alerts', to='stockledger.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Low stock alert',
                'verbose_name_plural': 'Low stock alerts',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['product', 'is_acknowledged'], name='sl_alert_product_open'),
                ],
            },
        ),
    ]
