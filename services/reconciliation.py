"""
Stock reconciliation — compare the aggregates against the ledger.

The ledger is authoritative. reconcile() reports every place where
Product.stock_quantity or Product.reserved_stock disagrees with it and,
with fix=True, rewrites the aggregates from it.
"""

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from stockledger.models.movement import StockMovement
from stockledger.models.product import Product
from stockledger.models.reservation import QuotationReservation

logger = logging.getLogger('stockledger')


STOCK_DRIFT = 'stock_drift'
RESERVED_DRIFT = 'reserved_drift'
OVER_RESERVED = 'over_reserved'
BROKEN_CHAIN = 'broken_chain'

# Kinds that fix=True rewrites; the rest need review
FIXABLE = (STOCK_DRIFT, RESERVED_DRIFT)


@dataclass(frozen=True)
class Discrepancy:
    """One disagreement between a product's aggregates and its ledger."""

    product_id: int
    kind: str
    expected: int
    actual: int
    movement_id: int | None = None

    def as_dict(self) -> dict:
        return {
            'product_id': self.product_id,
            'kind': self.kind,
            'expected': self.expected,
            'actual': self.actual,
            'movement_id': self.movement_id,
        }


def _chain_breaks(product_id) -> list[Discrepancy]:
    """Movements whose quantity_before isn't the previous quantity_after."""
    breaks = []
    running = 0
    rows = (
        StockMovement.objects.for_product(product_id)
        .chronological()
        .values_list('pk', 'quantity_before', 'quantity_after')
    )
    for pk, before, after in rows.iterator():
        if before != running:
            breaks.append(Discrepancy(product_id, BROKEN_CHAIN, running, before, movement_id=pk))
        running = after
    return breaks


def check_product(product) -> list[Discrepancy]:
    """All discrepancies for one product."""
    found = []
    replayed = StockMovement.objects.for_product(product).aggregate(
        t=Coalesce(Sum('quantity_change'), 0)
    )['t']
    reserved = QuotationReservation.objects.active().filter(product=product).aggregate(
        t=Coalesce(Sum('quantity'), 0)
    )['t']

    if replayed != product.stock_quantity:
        found.append(Discrepancy(product.pk, STOCK_DRIFT, replayed, product.stock_quantity))
    if reserved != product.reserved_stock:
        found.append(Discrepancy(product.pk, RESERVED_DRIFT, reserved, product.reserved_stock))
    if product.reserved_stock > product.stock_quantity:
        found.append(Discrepancy(product.pk, OVER_RESERVED, product.stock_quantity, product.reserved_stock))
    found.extend(_chain_breaks(product.pk))
    return found


def _fix_product(product_id) -> None:
    with transaction.atomic():
        product = Product.objects.select_for_update().get(pk=product_id)
        replayed = StockMovement.objects.for_product(product).aggregate(
            t=Coalesce(Sum('quantity_change'), 0)
        )['t']
        reserved = QuotationReservation.objects.active().filter(product=product).aggregate(
            t=Coalesce(Sum('quantity'), 0)
        )['t']
        Product.objects.filter(pk=product.pk).update(
            stock_quantity=max(replayed, 0),
            reserved_stock=reserved,
            updated_at=timezone.now(),
        )
    logger.warning(
        "stock.reconcile.fixed",
        extra={
            "product_id": product_id,
            "stock_quantity": replayed,
            "reserved_stock": reserved,
        },
    )


def reconcile(product=None, fix: bool = False) -> list[Discrepancy]:
    """
    Replay the ledger and compare it to the stored aggregates.

    Args:
        product: Optional product (or pk) to check (None = all).
        fix: Rewrite stock_quantity and reserved_stock from the ledger
            and active reservations for every drifting product.

    Returns:
        Discrepancies found before fixing.
    """
    qs = Product.objects.order_by('pk')
    if product is not None:
        qs = qs.filter(pk=getattr(product, 'pk', product))

    discrepancies = []
    to_fix = []
    for candidate in qs.iterator():
        found = check_product(candidate)
        for item in found:
            logger.warning("stock.reconcile.discrepancy", extra=item.as_dict())
        discrepancies.extend(found)

        if any(d.kind in FIXABLE for d in found):
            to_fix.append(candidate.pk)

    if fix:
        for pk in to_fix:
            _fix_product(pk)

    return discrepancies
