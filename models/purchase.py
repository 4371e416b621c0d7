"""
Purchase model — vendor purchase received into stock.
"""

from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import models
from django.db.models import Max
from django.db.models.functions import Cast, Substr
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import PaymentStatus

CENTS = Decimal('0.01')


def compute_purchase_totals(quantity: int, unit_cost: Decimal, gst_rate: Decimal) -> tuple[Decimal, Decimal]:
    """Return (gst_amount, total_cost) rounded to cents."""
    subtotal = Decimal(quantity) * Decimal(unit_cost)
    gst_amount = (subtotal * Decimal(gst_rate) / Decimal('100')).quantize(CENTS, rounding=ROUND_HALF_UP)
    total = (subtotal + gst_amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return gst_amount, total


class PurchaseManager(models.Manager):
    """Manager with purchase number generation."""

    def next_number(self, on=None) -> str:
        """Next purchase number in PUR-YYYYMMDD-NNNN format (NNNN grows past 9999)."""
        day = on or timezone.localdate()
        prefix = f"PUR-{day:%Y%m%d}-"
        last = self.filter(purchase_number__startswith=prefix).aggregate(
            seq=Max(Cast(Substr('purchase_number', len(prefix) + 1), models.IntegerField()))
        )['seq']
        return f"{prefix}{(last or 0) + 1:04d}"


class Purchase(models.Model):
    """
    Vendor purchase of a single product.

    Created by the purchase intake together with its `purchase`
    StockMovement (reference_type='purchase', reference_id=pk).
    """

    purchase_number = models.CharField(max_length=32, unique=True, verbose_name=_('Purchase number'))
    vendor_name = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Vendor'))
    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='purchases',
        verbose_name=_('Product'),
    )

    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_('Unit cost'))
    gst_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('18'), verbose_name=_('GST %'))
    gst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'), verbose_name=_('GST amount'))
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, verbose_name=_('Total cost'))

    invoice_number = models.CharField(max_length=64, blank=True, default='', verbose_name=_('Invoice number'))
    invoice_date = models.DateField(null=True, blank=True, verbose_name=_('Invoice date'))
    purchase_date = models.DateField(null=True, blank=True, verbose_name=_('Purchase date'))
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        verbose_name=_('Payment status'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Created by'),
    )
    created_at = models.DateTimeField(default=timezone.now)

    objects = PurchaseManager()

    class Meta:
        verbose_name = _('Purchase')
        verbose_name_plural = _('Purchases')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.purchase_number}: {self.quantity}x {self.product}"
