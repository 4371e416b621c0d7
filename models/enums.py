"""
Enums for Stockledger models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ActionType(models.TextChoices):
    """
    Kind of stock-affecting event recorded in the ledger.

    QUOTATION_RESERVED / QUOTATION_RELEASED never change on-hand stock
    (quantity_change = 0); they exist for the audit trail only.
    """
    PURCHASE = 'purchase', _('Purchase')
    SALE = 'sale', _('Sale')
    ADJUSTMENT = 'adjustment', _('Adjustment')
    TRANSFER = 'transfer', _('Transfer')
    RETURN = 'return', _('Return')
    QUOTATION_RESERVED = 'quotation_reserved', _('Quotation reserved')
    QUOTATION_RELEASED = 'quotation_released', _('Quotation released')


class AdjustmentType(models.TextChoices):
    """Direction of a manual adjustment."""
    ADD = 'add', _('Add stock (+)')
    REMOVE = 'remove', _('Remove stock (-)')


class AdjustmentReason(models.TextChoices):
    """Fixed set of reasons an operator may give for an adjustment."""
    DAMAGE = 'damage', _('Damage')
    LOSS = 'loss', _('Loss')
    CORRECTION = 'correction', _('Correction')
    EXPIRED = 'expired', _('Expired')
    FOUND = 'found', _('Found/Recovered')
    INITIAL_STOCK = 'initial_stock', _('Initial stock')
    OTHER = 'other', _('Other')


class ReservationStatus(models.TextChoices):
    """Reservation lifecycle status (RELEASED is terminal)."""
    RESERVED = 'reserved', _('Reserved')
    RELEASED = 'released', _('Released')


class StockStatus(models.TextChoices):
    """Derived stock status of a product."""
    IN_STOCK = 'in_stock', _('In stock')
    LOW_STOCK = 'low_stock', _('Low stock')
    OUT_OF_STOCK = 'out_of_stock', _('Out of stock')


class AlertType(models.TextChoices):
    """Low-stock alert kind."""
    LOW_STOCK = 'low_stock', _('Low stock')
    OUT_OF_STOCK = 'out_of_stock', _('Out of stock')


class PaymentStatus(models.TextChoices):
    """Vendor payment status of a purchase."""
    PENDING = 'pending', _('Pending')
    PARTIAL = 'partial', _('Partial')
    PAID = 'paid', _('Paid')


class ProductCategory(models.TextChoices):
    """Catalog categories that carry a typed specification."""
    CCTV_CAMERA = 'cctv_camera', _('CCTV camera')
    DVR = 'dvr', _('DVR')
    NVR = 'nvr', _('NVR')
    HDD = 'hdd', _('Hard disk')
    OTHER = 'other', _('Other')
