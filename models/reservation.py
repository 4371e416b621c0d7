"""
QuotationReservation model — stock held for a quotation.
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import ReservationStatus


class ReservationQuerySet(models.QuerySet):
    """QuerySet helpers for reservations."""

    def active(self):
        return self.filter(status=ReservationStatus.RESERVED)

    def for_quotation(self, quotation_id):
        return self.filter(quotation_id=str(quotation_id))


class QuotationReservation(models.Model):
    """
    Quantity provisionally held for a draft/sent quotation.

    LIFECYCLE:

        RESERVED ── release() ──► RELEASED (terminal)

    While RESERVED, quantity is included in Product.reserved_stock.
    Releasing decrements the aggregate exactly once; releasing again
    is a no-op.
    """

    quotation_id = models.CharField(max_length=64, db_index=True, verbose_name=_('Quotation'))
    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='reservations',
        verbose_name=_('Product'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))
    status = models.CharField(
        max_length=20,
        choices=ReservationStatus.choices,
        default=ReservationStatus.RESERVED,
        db_index=True,
        verbose_name=_('Status'),
    )

    reserved_at = models.DateTimeField(default=timezone.now, verbose_name=_('Reserved at'))
    released_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Released at'))
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        verbose_name = _('Quotation reservation')
        verbose_name_plural = _('Quotation reservations')
        ordering = ['-reserved_at']
        constraints = [
            models.UniqueConstraint(
                fields=['quotation_id', 'product'],
                condition=Q(status='reserved'),
                name='unique_active_quotation_reservation',
            ),
        ]
        indexes = [
            models.Index(fields=['product', 'status'], name='sl_reservation_product_status'),
        ]

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.RESERVED

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product} for {self.quotation_id} [{self.status}]"
