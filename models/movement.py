"""
StockMovement model — Immutable ledger of on-hand changes.
"""

from django.conf import settings
from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import ActionType


class StockMovementQuerySet(models.QuerySet):
    """QuerySet helpers for the audit trail."""

    def for_product(self, product):
        return self.filter(product_id=getattr(product, 'pk', product))

    def chronological(self):
        return self.order_by('created_at', 'id')


class StockMovement(models.Model):
    """
    Immutable record of one stock-affecting event.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements (action_type=adjustment)
    - quantity_after = quantity_before + quantity_change >= 0
    - Updates Product.stock_quantity on save(), conditionally on it
      still being quantity_before

    This is the ONLY model that changes Product.stock_quantity.
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Product'),
    )
    action_type = models.CharField(
        max_length=32,
        choices=ActionType.choices,
        verbose_name=_('Action'),
    )

    quantity_change = models.IntegerField(
        verbose_name=_('Change'),
        help_text=_('Positive = in, negative = out, zero = audit only'),
    )
    quantity_before = models.IntegerField(verbose_name=_('Before'))
    quantity_after = models.IntegerField(verbose_name=_('After'))

    reason = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Reason'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    # Originating purchase/order/quotation (opaque ids)
    reference_type = models.CharField(max_length=32, blank=True, default='', verbose_name=_('Reference type'))
    reference_id = models.CharField(max_length=64, blank=True, default='', verbose_name=_('Reference id'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('User'),
    )

    objects = StockMovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock movement')
        verbose_name_plural = _('Stock movements')
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='sl_movement_product_created'),
            models.Index(fields=['action_type'], name='sl_movement_action_type'),
            models.Index(fields=['reference_type', 'reference_id'], name='sl_movement_reference'),
        ]

    def save(self, *args, **kwargs):
        """Save movement and update the product cache atomically."""
        if self.pk:
            raise ValueError(
                "Stock movements are immutable. "
                "Record a compensating adjustment instead."
            )

        if self.quantity_after != self.quantity_before + self.quantity_change:
            raise ValueError("quantity_after must equal quantity_before + quantity_change")
        if self.quantity_after < 0:
            raise ValueError("quantity_after must not be negative")

        with transaction.atomic():
            super().save(*args, **kwargs)

            # Import here to avoid circular import
            from stockledger.exceptions import StockError
            from stockledger.models.product import Product

            if self.quantity_change == 0:
                return

            updated = Product.objects.filter(
                pk=self.product_id,
                stock_quantity=self.quantity_before,
            ).update(
                stock_quantity=self.quantity_after,
                updated_at=timezone.now(),
            )
            if not updated:
                raise StockError(
                    'CONFLICT',
                    product_id=self.product_id,
                    expected=self.quantity_before,
                )

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Stock movements are immutable. "
            "Record a compensating adjustment instead."
        )

    def __str__(self) -> str:
        sign = '+' if self.quantity_change > 0 else ''
        return (
            f"{self.get_action_type_display()} {sign}{self.quantity_change} "
            f"({self.quantity_before} → {self.quantity_after})"
        )
