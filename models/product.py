"""
Product model — the catalog's stock surface.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import ExpressionWrapper, F
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import ProductCategory, StockStatus


# Written only by the ledger and reservation services
LEDGER_FIELDS = ('stock_quantity', 'reserved_stock')

STOCK_VALUE = ExpressionWrapper(
    F('stock_quantity') * F('selling_price'),
    output_field=models.DecimalField(max_digits=18, decimal_places=2),
)


def compute_available(stock_quantity: int, reserved_stock: int) -> int:
    """Available to sell. May be negative if reservations drifted."""
    return (stock_quantity or 0) - (reserved_stock or 0)


def compute_status(available: int, minimum_stock_level: int) -> str:
    """Stock status for an available quantity."""
    if available <= 0:
        return StockStatus.OUT_OF_STOCK
    if available <= minimum_stock_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class ProductQuerySet(models.QuerySet):
    """QuerySet with stock-status filters."""

    def with_available(self):
        """Annotate available_qty = stock_quantity - reserved_stock."""
        return self.annotate(available_qty=F('stock_quantity') - F('reserved_stock'))

    def out_of_stock(self):
        return self.with_available().filter(available_qty__lte=0)

    def low_stock(self):
        return self.with_available().filter(
            available_qty__gt=0,
            available_qty__lte=F('minimum_stock_level'),
        )

    def in_stock(self):
        return self.with_available().filter(available_qty__gt=F('minimum_stock_level'))

    def needs_reorder(self):
        """Low or out of stock."""
        return self.with_available().filter(available_qty__lte=F('minimum_stock_level'))

    def with_stock_value(self):
        """Annotate stock_value_amount = stock_quantity * selling_price."""
        return self.annotate(stock_value_amount=STOCK_VALUE)


class Product(models.Model):
    """
    Sellable item with its stock aggregates.

    stock_quantity and reserved_stock are caches owned by the ledger:
    only StockMovement.save() writes stock_quantity and only the
    reservation service writes reserved_stock. Never assign them from
    forms or views.
    """

    name = models.CharField(max_length=200, verbose_name=_('Name'))
    sku = models.CharField(max_length=64, blank=True, default='', db_index=True, verbose_name=_('SKU'))
    category = models.CharField(
        max_length=20,
        choices=ProductCategory.choices,
        default=ProductCategory.OTHER,
        verbose_name=_('Category'),
    )
    specifications = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Specifications'),
        help_text=_('Typed per category, see stockledger.specs'),
    )

    selling_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Selling price'),
    )
    last_purchase_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Last purchase price'),
    )

    # Aggregates maintained by the ledger
    stock_quantity = models.PositiveIntegerField(default=0, verbose_name=_('On hand'))
    reserved_stock = models.PositiveIntegerField(default=0, verbose_name=_('Reserved'))

    # Advisory thresholds
    minimum_stock_level = models.PositiveIntegerField(default=5, verbose_name=_('Minimum stock level'))
    reorder_quantity = models.PositiveIntegerField(default=10, verbose_name=_('Reorder quantity'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']

    @property
    def available(self) -> int:
        """On hand minus reserved."""
        return compute_available(self.stock_quantity, self.reserved_stock)

    @property
    def stock_status(self) -> str:
        return compute_status(self.available, self.minimum_stock_level)

    @property
    def stock_value(self) -> Decimal:
        """On hand valued at the selling price."""
        return Decimal(self.stock_quantity or 0) * (self.selling_price or Decimal('0'))

    def save(self, *args, **kwargs):
        """Updates never write the ledger-owned aggregates."""
        if not self._state.adding and self.pk is not None:
            update_fields = kwargs.get('update_fields')
            if update_fields is None:
                update_fields = [
                    f.name for f in self._meta.concrete_fields
                    if not f.primary_key and f.name not in LEDGER_FIELDS
                ]
            kwargs['update_fields'] = [f for f in update_fields if f not in LEDGER_FIELDS]
        super().save(*args, **kwargs)

    def clean(self):
        from stockledger.specs import parse_spec, validate_spec

        try:
            spec = parse_spec(self.category, self.specifications or {})
        except (TypeError, ValueError) as exc:
            raise ValidationError({'specifications': str(exc)}) from exc
        errors = validate_spec(spec)
        if errors:
            raise ValidationError({'specifications': errors})

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})" if self.sku else self.name
