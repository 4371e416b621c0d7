"""
Stockledger Models.

Core models for stock accounting:
- Product: Stock aggregates (on hand, reserved) and thresholds
- StockMovement: Immutable ledger of on-hand changes
- StockAdjustment: Operator corrections, one per adjustment movement
- QuotationReservation: Stock held for quotations
- Purchase: Vendor purchases received into stock
- LowStockAlert: Products at or below their minimum level
"""

from stockledger.models.adjustment import StockAdjustment
from stockledger.models.alert import LowStockAlert
from stockledger.models.enums import (
    ActionType,
    AdjustmentReason,
    AdjustmentType,
    AlertType,
    PaymentStatus,
    ProductCategory,
    ReservationStatus,
    StockStatus,
)
from stockledger.models.movement import StockMovement
from stockledger.models.product import Product
from stockledger.models.purchase import Purchase
from stockledger.models.reservation import QuotationReservation

__all__ = [
    'ActionType',
    'AdjustmentReason',
    'AdjustmentType',
    'AlertType',
    'PaymentStatus',
    'ProductCategory',
    'ReservationStatus',
    'StockStatus',
    'Product',
    'StockMovement',
    'StockAdjustment',
    'QuotationReservation',
    'Purchase',
    'LowStockAlert',
]
