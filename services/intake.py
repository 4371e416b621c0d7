"""
Stock intake — validated entry points (purchase, adjustment, sale, return).

Each call produces exactly one StockMovement, or nothing at all.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone

from stockledger.conf import stockledger_settings
from stockledger.exceptions import StockError
from stockledger.models.adjustment import StockAdjustment
from stockledger.models.enums import ActionType, AdjustmentReason, AdjustmentType, PaymentStatus
from stockledger.models.product import Product
from stockledger.models.purchase import Purchase, compute_purchase_totals
from stockledger.services.ledger import append_locked, lock_product, product_pk, run_atomic

logger = logging.getLogger('stockledger')


def validate_quantity(quantity) -> int:
    """Quantities are positive integers."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise StockError('INVALID_QUANTITY', requested=quantity)
    return quantity


def notes_with_serials(notes: str, serial_numbers) -> str:
    """Embed serial numbers in adjustment notes, one per line."""
    serials = [s.strip() for s in serial_numbers or [] if s and s.strip()]
    if not serials:
        return notes or ''
    return f"{notes or ''}\n\nSerial Numbers:\n" + "\n".join(serials)


def _to_decimal(value, code='INVALID_COST') -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise StockError(code, value=value) from None


def _receive_purchase_locked(pk, quantity, unit_cost, *, vendor_name='', gst_rate=None,
                             invoice_number='', invoice_date=None, purchase_date=None,
                             payment_status=PaymentStatus.PENDING, notes='',
                             reason='Purchase from vendor', user=None):
    lock_product(pk)

    gst_amount, total_cost = compute_purchase_totals(quantity, unit_cost, gst_rate)
    purchase_number = Purchase.objects.next_number()
    try:
        with transaction.atomic():
            purchase = Purchase.objects.create(
                purchase_number=purchase_number,
                vendor_name=vendor_name,
                product_id=pk,
                quantity=quantity,
                unit_cost=unit_cost,
                gst_rate=gst_rate,
                gst_amount=gst_amount,
                total_cost=total_cost,
                invoice_number=invoice_number,
                invoice_date=invoice_date,
                purchase_date=purchase_date or timezone.localdate(),
                payment_status=payment_status,
                notes=notes,
                created_by=user,
            )
    except IntegrityError:
        # Numbers are per day, not per product: a concurrent purchase took it
        raise StockError('CONFLICT', product_id=pk, purchase_number=purchase_number) from None

    movement = append_locked(
        pk,
        ActionType.PURCHASE,
        quantity,
        reason=reason,
        notes=f"Invoice: {invoice_number or 'N/A'}",
        reference_type='purchase',
        reference_id=purchase.pk,
        user=user,
    )

    Product.objects.filter(pk=pk).update(last_purchase_price=unit_cost)

    logger.info(
        "stock.purchase.received",
        extra={
            "product_id": pk,
            "qty": quantity,
            "unit_cost": str(unit_cost),
            "purchase_number": purchase.purchase_number,
            "movement_id": movement.pk,
        },
    )
    return movement


class StockIntake:
    """Business entry points that append to the ledger."""

    @classmethod
    def receive_purchase(cls, product, quantity, unit_cost, vendor_name='',
                         gst_rate=None, invoice_number='', invoice_date=None,
                         purchase_date=None, payment_status=PaymentStatus.PENDING,
                         notes='', reason='Purchase from vendor', user=None):
        """
        Receive a vendor purchase into stock.

        Creates a Purchase, appends a `purchase` movement (+quantity)
        and records unit_cost as the product's last purchase price.

        Returns:
            The purchase StockMovement (reference_id = Purchase pk)

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0
            StockError('INVALID_COST'): If unit_cost is negative or not a number
        """
        validate_quantity(quantity)
        unit_cost = _to_decimal(unit_cost)
        if unit_cost < 0:
            raise StockError('INVALID_COST', value=unit_cost)
        gst_rate = _to_decimal(
            stockledger_settings.DEFAULT_GST_RATE if gst_rate is None else gst_rate
        )
        if payment_status not in PaymentStatus.values:
            raise ValueError(f"Unknown payment_status: {payment_status!r}")

        pk = product_pk(product)
        return run_atomic(lambda: _receive_purchase_locked(
            pk,
            quantity,
            unit_cost,
            vendor_name=vendor_name,
            gst_rate=gst_rate,
            invoice_number=invoice_number,
            invoice_date=invoice_date,
            purchase_date=purchase_date,
            payment_status=payment_status,
            notes=notes,
            reason=reason,
            user=user,
        ))

    @classmethod
    def apply_adjustment(cls, product, adjustment_type, quantity, reason,
                         notes='', serial_numbers=None, user=None):
        """
        Manual stock correction.

        Returns:
            The adjustment StockMovement (its StockAdjustment is
            movement.adjustment)

        Raises:
            StockError('REASON_REQUIRED'): If reason is empty
            StockError('INVALID_REASON'): If reason is not an AdjustmentReason
            StockError('INVALID_ADJUSTMENT_TYPE'): If type is not add/remove
            StockError('INVALID_QUANTITY'): If quantity <= 0 or removal
                would drive on-hand below zero
        """
        if not reason:
            raise StockError('REASON_REQUIRED')
        if reason not in AdjustmentReason.values:
            raise StockError('INVALID_REASON', reason=reason, allowed=list(AdjustmentReason.values))
        if adjustment_type not in AdjustmentType.values:
            raise StockError('INVALID_ADJUSTMENT_TYPE', adjustment_type=adjustment_type)
        validate_quantity(quantity)

        change = quantity if adjustment_type == AdjustmentType.ADD else -quantity
        full_notes = notes_with_serials(notes, serial_numbers)
        serials = [s.strip() for s in serial_numbers or [] if s and s.strip()]
        pk = product_pk(product)

        def operation():
            movement = append_locked(
                pk,
                ActionType.ADJUSTMENT,
                change,
                reason=reason,
                notes=full_notes,
                reference_type='adjustment',
                user=user,
            )
            StockAdjustment.objects.create(
                product_id=pk,
                movement=movement,
                adjustment_type=adjustment_type,
                quantity=quantity,
                reason=reason,
                notes=full_notes,
                serial_numbers=serials,
                adjusted_by=user,
            )
            logger.info(
                "stock.adjustment.applied",
                extra={
                    "product_id": pk,
                    "change": change,
                    "reason": reason,
                    "movement_id": movement.pk,
                },
            )
            return movement

        return run_atomic(operation)

    @classmethod
    def sell(cls, product, quantity, reference_type='order', reference_id='',
             reason='Sale', user=None):
        """
        Sale that was not reserved beforehand.

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0 or exceeds
                what is on hand and not reserved
        """
        validate_quantity(quantity)
        pk = product_pk(product)
        return run_atomic(lambda: append_locked(
            pk,
            ActionType.SALE,
            -quantity,
            reason=reason,
            reference_type=reference_type,
            reference_id=reference_id,
            user=user,
        ))

    @classmethod
    def receive_return(cls, product, quantity, reference_type='order',
                       reference_id='', reason='Customer return', user=None):
        """Goods returned into stock."""
        validate_quantity(quantity)
        pk = product_pk(product)
        return run_atomic(lambda: append_locked(
            pk,
            ActionType.RETURN,
            quantity,
            reason=reason,
            reference_type=reference_type,
            reference_id=reference_id,
            user=user,
        ))

    @classmethod
    def receive_invoice(cls, invoice, products, payment_status=PaymentStatus.PENDING, user=None):
        """
        Post an extracted (and operator-corrected) invoice.

        Args:
            invoice: ExtractedInvoice
            products: mapping of item index -> product (or pk). Items
                without a mapping are skipped.

        Returns:
            List of purchase movements, in item order

        All lines are posted in one transaction: either every mapped
        line is received or none is.
        """
        lines = []
        for index, item in enumerate(invoice.items):
            product = products.get(index)
            if product is None:
                continue
            validate_quantity(item.quantity)
            unit_cost = _to_decimal(item.unit_cost)
            if unit_cost < 0:
                raise StockError('INVALID_COST', value=unit_cost)
            gst_rate = _to_decimal(
                item.gst_rate if item.gst_rate is not None else stockledger_settings.DEFAULT_GST_RATE
            )
            lines.append((product_pk(product), item.quantity, unit_cost, gst_rate))

        def operation():
            return [
                _receive_purchase_locked(
                    pk,
                    quantity,
                    unit_cost,
                    vendor_name=invoice.vendor_name,
                    gst_rate=gst_rate,
                    invoice_number=invoice.invoice_number,
                    invoice_date=invoice.invoice_date,
                    payment_status=payment_status,
                    user=user,
                )
                for pk, quantity, unit_cost, gst_rate in lines
            ]

        movements = run_atomic(operation)
        logger.info(
            "stock.invoice.received",
            extra={
                "invoice_number": invoice.invoice_number,
                "lines": len(movements),
                "skipped": len(invoice.items) - len(movements),
            },
        )
        return movements
