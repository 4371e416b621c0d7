"""
Stock queries — read-only operations.

All methods are classmethod on Stock and use no locking. They read the
Product aggregates, never the ledger.
"""

from decimal import Decimal

from django.db.models import Count, F, Q, Sum

from stockledger.exceptions import StockError
from stockledger.models.enums import StockStatus
from stockledger.models.product import STOCK_VALUE, Product, compute_available, compute_status
from stockledger.services.ledger import product_pk


def _get_product(product) -> Product:
    if isinstance(product, Product):
        return product
    try:
        return Product.objects.get(pk=product)
    except (Product.DoesNotExist, ValueError):
        raise StockError('NOT_FOUND', product_id=product) from None


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def available(cls, product) -> int:
        """
        Available quantity for new reservations and sales.

        available = stock_quantity - reserved_stock

        Args:
            product: Product object or pk (instances are refreshed)

        Returns:
            int, negative only if reservations drifted
        """
        product = _get_product(product_pk(product))
        return compute_available(product.stock_quantity, product.reserved_stock)

    @classmethod
    def status(cls, product) -> dict:
        """
        Stock status snapshot.

        Returns:
            {'available', 'status', 'stock_quantity', 'reserved_stock',
             'minimum_stock_level'}
        """
        product = _get_product(product_pk(product))
        available = compute_available(product.stock_quantity, product.reserved_stock)
        return {
            'available': available,
            'status': compute_status(available, product.minimum_stock_level),
            'stock_quantity': product.stock_quantity,
            'reserved_stock': product.reserved_stock,
            'minimum_stock_level': product.minimum_stock_level,
        }

    @classmethod
    def products_by_status(cls, status: str):
        """Products currently in the given StockStatus."""
        qs = Product.objects.all()
        if status == StockStatus.OUT_OF_STOCK:
            return qs.out_of_stock()
        if status == StockStatus.LOW_STOCK:
            return qs.low_stock()
        if status == StockStatus.IN_STOCK:
            return qs.in_stock()
        raise ValueError(f"Unknown stock status: {status!r}")

    @classmethod
    def summary(cls) -> dict:
        """
        Inventory totals as shown on the inventory dashboard.

        total_value is on hand valued at selling price; per product see
        Product.stock_value or Product.objects.with_stock_value().
        """
        totals = Product.objects.aggregate(
            products=Count('pk'),
            on_hand=Sum('stock_quantity'),
            reserved=Sum('reserved_stock'),
            out_of_stock=Count('pk', filter=Q(stock_quantity__lte=F('reserved_stock'))),
            low_stock=Count('pk', filter=Q(
                stock_quantity__gt=F('reserved_stock'),
                stock_quantity__lte=F('reserved_stock') + F('minimum_stock_level'),
            )),
            total_value=Sum(STOCK_VALUE),
        )
        return {
            'products': totals['products'] or 0,
            'on_hand': totals['on_hand'] or 0,
            'reserved': totals['reserved'] or 0,
            'out_of_stock': totals['out_of_stock'] or 0,
            'low_stock': totals['low_stock'] or 0,
            'total_value': totals['total_value'] or Decimal('0'),
        }
