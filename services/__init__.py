"""
Stock services — modular organization of stock operations.

Re-exports the building blocks of the Stock facade:
    from stockledger.services import StockQueries, StockLedger, StockReservations, StockIntake
"""

from stockledger.services.intake import StockIntake
from stockledger.services.ledger import StockLedger
from stockledger.services.queries import StockQueries
from stockledger.services.reservations import StockReservations

__all__ = [
    'StockQueries',
    'StockLedger',
    'StockReservations',
    'StockIntake',
]
