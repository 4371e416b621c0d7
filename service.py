"""
Stock Service — The single public interface for all stock operations.

Usage:
    from stockledger import stock, StockError

    stock.receive_purchase(camera, 50, unit_cost=Decimal('100'))
    reservation = stock.reserve('Q-1001', camera, 10)
    stock.available(camera)  # 40
"""

from stockledger.services.alerts import acknowledge, acknowledge_all, generate_alerts
from stockledger.services.intake import StockIntake
from stockledger.services.ledger import StockLedger
from stockledger.services.queries import StockQueries
from stockledger.services.reconciliation import reconcile
from stockledger.services.reservations import StockReservations


class Stock(StockQueries, StockLedger, StockReservations, StockIntake):
    """
    Single interface for all stock operations.

    Mutating methods each run as one transaction that locks the product
    row; see stockledger.services.ledger for the retry policy.
    """

    reconcile = staticmethod(reconcile)
    generate_alerts = staticmethod(generate_alerts)
    acknowledge_alert = staticmethod(acknowledge)
    acknowledge_all_alerts = staticmethod(acknowledge_all)
