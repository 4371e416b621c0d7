"""
StockAdjustment model — operator correction paired with its movement.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import AdjustmentReason, AdjustmentType


class StockAdjustment(models.Model):
    """
    Operator-entered stock correction.

    Always paired with exactly one StockMovement (action_type=adjustment).
    Serial numbers are kept as a list and also embedded in notes.
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='adjustments',
        verbose_name=_('Product'),
    )
    movement = models.OneToOneField(
        'stockledger.StockMovement',
        on_delete=models.PROTECT,
        related_name='adjustment',
        verbose_name=_('Movement'),
    )
    adjustment_type = models.CharField(
        max_length=10,
        choices=AdjustmentType.choices,
        verbose_name=_('Type'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))
    reason = models.CharField(
        max_length=20,
        choices=AdjustmentReason.choices,
        verbose_name=_('Reason'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))
    serial_numbers = models.JSONField(default=list, blank=True, verbose_name=_('Serial numbers'))

    adjusted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Adjusted by'),
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _('Stock adjustment')
        verbose_name_plural = _('Stock adjustments')
        ordering = ['-created_at']

    def __str__(self) -> str:
        sign = '+' if self.adjustment_type == AdjustmentType.ADD else '-'
        return f"{sign}{self.quantity} {self.product} ({self.get_reason_display()})"
