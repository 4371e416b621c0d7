"""
LowStockAlert model — product whose available stock hit its minimum level.

Usage:
    from stockledger.services.alerts import generate_alerts

    # Run periodically (cron) or after stock changes
    created = generate_alerts()
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import AlertType


class LowStockAlertQuerySet(models.QuerySet):

    def open(self):
        """Alerts nobody has acknowledged yet."""
        return self.filter(is_acknowledged=False)


class LowStockAlert(models.Model):
    """
    Snapshot of a product at the moment it needed reordering.

    At most one unacknowledged alert per product is kept by
    generate_alerts(); acknowledging it allows a new one to be raised.
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.CASCADE,
        related_name='stock_alerts',
        verbose_name=_('Product'),
    )
    alert_type = models.CharField(
        max_length=20,
        choices=AlertType.choices,
        default=AlertType.LOW_STOCK,
        verbose_name=_('Type'),
    )
    current_stock = models.IntegerField(
        verbose_name=_('Available'),
        help_text=_('Available quantity when the alert was raised'),
    )
    minimum_level = models.PositiveIntegerField(verbose_name=_('Minimum level'))

    is_acknowledged = models.BooleanField(default=False, verbose_name=_('Acknowledged'))
    acknowledged_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Acknowledged at'))
    acknowledged_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Acknowledged by'),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Created at'))

    objects = LowStockAlertQuerySet.as_manager()

    class Meta:
        verbose_name = _('Low stock alert')
        verbose_name_plural = _('Low stock alerts')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['product', 'is_acknowledged'], name='sl_alert_product_open'),
        ]

    def __str__(self) -> str:
        return f"{self.get_alert_type_display()}: {self.product} ({self.current_stock} ≤ {self.minimum_level})"
