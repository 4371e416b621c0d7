"""
Stock ledger — the append-only log of on-hand changes.

Every mutating call runs one read-compute-write cycle inside
transaction.atomic(): lock the product row, compute quantity_after,
insert the movement. StockMovement.save() writes the product cache
conditionally on quantity_before, so a lost update surfaces as
StockError('CONFLICT') and the whole cycle is re-run.
"""

import logging

from django.db import OperationalError, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from stockledger.conf import stockledger_settings
from stockledger.exceptions import StockError
from stockledger.models.enums import ActionType
from stockledger.models.movement import StockMovement
from stockledger.models.product import Product

logger = logging.getLogger('stockledger')


def product_pk(product):
    """Accept a Product instance or its primary key."""
    return getattr(product, 'pk', product)


def run_atomic(operation, *, idempotent=False):
    """
    Run operation() in its own transaction with bounded retries.

    CONFLICT re-runs the whole cycle (never a raw append) up to
    CONFLICT_RETRIES times. Store errors are retried only for
    idempotent operations, up to TRANSIENT_RETRIES times, and are
    then surfaced as StockError('TRANSIENT').
    """
    conflicts = 0
    transient = 0

    while True:
        try:
            with transaction.atomic():
                return operation()
        except StockError as exc:
            if exc.code != 'CONFLICT' or conflicts >= stockledger_settings.CONFLICT_RETRIES:
                raise
            conflicts += 1
            logger.info(
                "stock.conflict.retry",
                extra={"attempt": conflicts, **exc.data},
            )
        except OperationalError as exc:
            if not idempotent or transient >= stockledger_settings.TRANSIENT_RETRIES:
                raise StockError('TRANSIENT', detail=str(exc)) from exc
            transient += 1
            logger.info(
                "stock.transient.retry",
                extra={"attempt": transient, "detail": str(exc)},
            )


def lock_product(pk) -> Product:
    """Fetch the product row under select_for_update()."""
    try:
        return Product.objects.select_for_update().get(pk=pk)
    except Product.DoesNotExist:
        raise StockError('NOT_FOUND', product_id=pk) from None


def append_locked(pk, action_type, quantity_change, *, reason='', notes='',
                  reference_type='', reference_id='', user=None) -> StockMovement:
    """
    Append one movement. Must run inside transaction.atomic().

    Raises:
        StockError('NOT_FOUND'): If the product doesn't exist
        StockError('INVALID_QUANTITY'): If on-hand would go negative,
            or an outgoing change would leave less than what is reserved
    """
    product = lock_product(pk)
    before = product.stock_quantity
    after = before + quantity_change

    if after < 0:
        raise StockError(
            'INVALID_QUANTITY',
            'Cannot reduce stock below zero',
            available=before,
            requested=-quantity_change,
        )

    if quantity_change < 0 and after < product.reserved_stock:
        raise StockError(
            'INVALID_QUANTITY',
            'Cannot reduce stock below the reserved quantity',
            available=product.available,
            requested=-quantity_change,
            reserved=product.reserved_stock,
        )

    movement = StockMovement.objects.create(
        product=product,
        action_type=action_type,
        quantity_change=quantity_change,
        quantity_before=before,
        quantity_after=after,
        reason=reason,
        notes=notes,
        reference_type=reference_type,
        reference_id=str(reference_id) if reference_id is not None else '',
        user=user,
    )
    logger.info(
        "stock.append",
        extra={
            "product_id": product.pk,
            "action_type": str(action_type),
            "change": quantity_change,
            "before": before,
            "after": after,
            "movement_id": movement.pk,
        },
    )
    return movement


class StockLedger:
    """Ledger append and audit queries."""

    @classmethod
    def append(cls, product, action_type, quantity_change, reason='',
               reference_type='', reference_id='', notes='', user=None):
        """
        Append a movement to the product's ledger.

        Raises:
            StockError('INVALID_QUANTITY'): If on-hand would go negative
            StockError('NOT_FOUND'): If product doesn't exist

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on Product
            - StockMovement.save() compare-and-swaps stock_quantity
        """
        if action_type not in ActionType.values:
            raise ValueError(f"Unknown action_type: {action_type!r}")

        pk = product_pk(product)
        return run_atomic(lambda: append_locked(
            pk,
            action_type,
            quantity_change,
            reason=reason,
            notes=notes,
            reference_type=reference_type,
            reference_id=reference_id,
            user=user,
        ))

    @classmethod
    def movements(cls, product, action_type=None, start=None, end=None):
        """
        Audit trail for a product, oldest first.

        Args:
            action_type: Only movements of this ActionType
            start: First day included (date, local time)
            end: Last day included (date, local time)
        """
        qs = StockMovement.objects.for_product(product).chronological()
        if action_type:
            qs = qs.filter(action_type=action_type)
        if start is not None:
            qs = qs.filter(created_at__date__gte=start)
        if end is not None:
            qs = qs.filter(created_at__date__lte=end)
        return qs

    @classmethod
    def replay(cls, product) -> int:
        """On-hand quantity reconstructed from the ledger, starting at 0."""
        return StockMovement.objects.for_product(product).aggregate(
            t=Coalesce(Sum('quantity_change'), 0)
        )['t']
