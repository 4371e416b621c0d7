"""
Quotation reservations — reserve, release, convert.

Lock order is always Product, then QuotationReservation.
"""

import logging

from django.utils import timezone

from stockledger.exceptions import StockError
from stockledger.models.enums import ActionType, ReservationStatus
from stockledger.models.product import Product
from stockledger.models.reservation import QuotationReservation
from stockledger.services.intake import validate_quantity
from stockledger.services.ledger import append_locked, lock_product, product_pk, run_atomic

logger = logging.getLogger('stockledger')


def _set_reserved(product: Product, new_reserved: int) -> None:
    """Compare-and-swap Product.reserved_stock."""
    updated = Product.objects.filter(
        pk=product.pk,
        reserved_stock=product.reserved_stock,
    ).update(
        reserved_stock=new_reserved,
        updated_at=timezone.now(),
    )
    if not updated:
        raise StockError('CONFLICT', product_id=product.pk, expected=product.reserved_stock)
    product.reserved_stock = new_reserved


def _release_locked(reservation: QuotationReservation, product: Product, reason: str) -> QuotationReservation:
    """Terminate an active reservation and give its quantity back."""
    new_reserved = product.reserved_stock - reservation.quantity
    if new_reserved < 0:
        logger.warning(
            "stock.reservation.drift",
            extra={
                "product_id": product.pk,
                "reserved_stock": product.reserved_stock,
                "releasing": reservation.quantity,
            },
        )
        new_reserved = 0

    reservation.status = ReservationStatus.RELEASED
    reservation.released_at = timezone.now()
    reservation.save(update_fields=['status', 'released_at', 'updated_at'])
    _set_reserved(product, new_reserved)

    append_locked(
        product.pk,
        ActionType.QUOTATION_RELEASED,
        0,
        reason=reason,
        reference_type='quotation',
        reference_id=reservation.quotation_id,
    )
    logger.info(
        "stock.reservation.released",
        extra={
            "reservation_id": reservation.pk,
            "quotation_id": reservation.quotation_id,
            "product_id": product.pk,
            "qty": reservation.quantity,
        },
    )
    return reservation


class StockReservations:
    """Reservation lifecycle methods."""

    @classmethod
    def reserve(cls, quotation_id, product, quantity):
        """
        Hold stock for a quotation without touching on-hand.

        Returns:
            The RESERVED QuotationReservation

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0
            StockError('INSUFFICIENT_AVAILABLE'): If quantity > available
            StockError('ALREADY_RESERVED'): If the quotation already holds this product
            StockError('NOT_FOUND'): If product doesn't exist
        """
        validate_quantity(quantity)
        quotation_id = str(quotation_id)
        pk = product_pk(product)

        def operation():
            locked = lock_product(pk)

            if QuotationReservation.objects.active().filter(
                quotation_id=quotation_id, product=locked,
            ).exists():
                raise StockError('ALREADY_RESERVED', quotation_id=quotation_id, product_id=pk)

            available = locked.available
            if quantity > available:
                raise StockError(
                    'INSUFFICIENT_AVAILABLE',
                    available=available,
                    requested=quantity,
                )

            reservation = QuotationReservation.objects.create(
                quotation_id=quotation_id,
                product=locked,
                quantity=quantity,
                status=ReservationStatus.RESERVED,
            )
            _set_reserved(locked, locked.reserved_stock + quantity)

            append_locked(
                pk,
                ActionType.QUOTATION_RESERVED,
                0,
                reason=f"Reserved {quantity} for quotation {quotation_id}",
                reference_type='quotation',
                reference_id=quotation_id,
            )
            logger.info(
                "stock.reservation.created",
                extra={
                    "reservation_id": reservation.pk,
                    "quotation_id": quotation_id,
                    "product_id": pk,
                    "qty": quantity,
                },
            )
            return reservation

        return run_atomic(operation)

    @classmethod
    def release(cls, quotation_id, product, reason='Quotation released'):
        """
        Release the quotation's reservation on a product.

        Idempotent: when the reservation was already released, returns
        it unchanged.

        Raises:
            StockError('NOT_FOUND'): If the pair never had a reservation
        """
        quotation_id = str(quotation_id)
        pk = product_pk(product)

        def operation():
            locked = lock_product(pk)
            reservation = QuotationReservation.objects.select_for_update().active().filter(
                quotation_id=quotation_id, product=locked,
            ).first()

            if reservation is None:
                previous = QuotationReservation.objects.filter(
                    quotation_id=quotation_id,
                    product=locked,
                    status=ReservationStatus.RELEASED,
                ).order_by('-released_at', '-pk').first()
                if previous is None:
                    raise StockError('NOT_FOUND', quotation_id=quotation_id, product_id=pk)
                logger.info(
                    "stock.reservation.release_noop",
                    extra={"reservation_id": previous.pk, "quotation_id": quotation_id},
                )
                return previous

            return _release_locked(reservation, locked, reason)

        return run_atomic(operation, idempotent=True)

    @classmethod
    def release_reservation(cls, reservation_id, reason='Quotation released'):
        """Release by reservation id. Idempotent."""
        try:
            product_id = QuotationReservation.objects.values_list('product_id', flat=True).get(pk=reservation_id)
        except (QuotationReservation.DoesNotExist, ValueError):
            raise StockError('NOT_FOUND', reservation_id=reservation_id) from None

        def operation():
            locked = lock_product(product_id)
            reservation = QuotationReservation.objects.select_for_update().get(pk=reservation_id)
            if not reservation.is_active:
                logger.info(
                    "stock.reservation.release_noop",
                    extra={"reservation_id": reservation.pk, "quotation_id": reservation.quotation_id},
                )
                return reservation
            return _release_locked(reservation, locked, reason)

        return run_atomic(operation, idempotent=True)

    @classmethod
    def convert(cls, quotation_id, product, reference_type='order',
                reference_id='', user=None):
        """
        Turn a reservation into a sale.

        Releases the reservation and appends a `sale` movement for the
        reserved quantity in one transaction.

        Returns:
            The sale StockMovement

        Raises:
            StockError('NOT_FOUND'): If there is no active reservation
        """
        quotation_id = str(quotation_id)
        pk = product_pk(product)

        def operation():
            locked = lock_product(pk)
            reservation = QuotationReservation.objects.select_for_update().active().filter(
                quotation_id=quotation_id, product=locked,
            ).first()
            if reservation is None:
                raise StockError('NOT_FOUND', quotation_id=quotation_id, product_id=pk)

            _release_locked(reservation, locked, f"Converted quotation {quotation_id}")
            movement = append_locked(
                pk,
                ActionType.SALE,
                -reservation.quantity,
                reason=f"Sale from quotation {quotation_id}",
                reference_type=reference_type,
                reference_id=reference_id or quotation_id,
                user=user,
            )
            logger.info(
                "stock.reservation.converted",
                extra={
                    "reservation_id": reservation.pk,
                    "quotation_id": quotation_id,
                    "movement_id": movement.pk,
                },
            )
            return movement

        return run_atomic(operation)

    @classmethod
    def reservations(cls, quotation_id=None, product=None, active_only=False):
        """List reservations by quotation and/or product."""
        qs = QuotationReservation.objects.select_related('product')
        if quotation_id is not None:
            qs = qs.for_quotation(quotation_id)
        if product is not None:
            qs = qs.filter(product_id=product_pk(product))
        if active_only:
            qs = qs.active()
        return qs
