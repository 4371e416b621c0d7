"""
Django Stockledger — stock ledger and quotation reservations.

Every change to on-hand stock is an immutable StockMovement; quotations
hold stock through QuotationReservation without touching on-hand.

Usage:
    from stockledger import stock, StockError

    stock.receive_purchase(product, 50, unit_cost=Decimal('100'))
    stock.reserve('Q-1001', product, 10)
    stock.available(product)  # 40
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from stockledger.service import Stock
        return Stock
    elif name == 'StockError':
        from stockledger.exceptions import StockError
        return StockError
    elif name == 'Product':
        from stockledger.models.product import Product
        return Product
    elif name == 'StockMovement':
        from stockledger.models.movement import StockMovement
        return StockMovement
    elif name == 'StockAdjustment':
        from stockledger.models.adjustment import StockAdjustment
        return StockAdjustment
    elif name == 'QuotationReservation':
        from stockledger.models.reservation import QuotationReservation
        return QuotationReservation
    elif name == 'Purchase':
        from stockledger.models.purchase import Purchase
        return Purchase
    elif name == 'LowStockAlert':
        from stockledger.models.alert import LowStockAlert
        return LowStockAlert
    elif name in ('ActionType', 'ReservationStatus', 'StockStatus'):
        from stockledger.models import enums
        return getattr(enums, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'stock',
    'StockError',
    'Product',
    'StockMovement',
    'StockAdjustment',
    'QuotationReservation',
    'Purchase',
    'LowStockAlert',
    'ActionType',
    'ReservationStatus',
    'StockStatus',
]

__version__ = '0.1.0'
