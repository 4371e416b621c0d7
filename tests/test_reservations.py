"""
Tests for quotation reservations.
"""

from decimal import Decimal

import pytest

from stockledger import stock, StockError
from stockledger.models import ActionType, QuotationReservation, ReservationStatus, StockMovement


pytestmark = pytest.mark.django_db


class TestReserve:
    """Tests for stock.reserve()."""

    def test_reserve_reduces_available(self, stocked_product):
        """50 on hand, reserve 10 -> available 40, reserved 10."""
        reservation = stock.reserve('Q-A', stocked_product, 10)

        stocked_product.refresh_from_db()
        assert reservation.status == ReservationStatus.RESERVED
        assert stocked_product.reserved_stock == 10
        assert stocked_product.stock_quantity == 50
        assert stock.available(stocked_product) == 40

    def test_reserve_records_audit_movement(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 10)

        movement = stock.movements(stocked_product).last()
        assert movement.action_type == ActionType.QUOTATION_RESERVED
        assert movement.quantity_change == 0
        assert movement.quantity_before == movement.quantity_after == 50
        assert movement.reference_type == 'quotation'
        assert movement.reference_id == 'Q-A'

    def test_reserve_more_than_available(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 45)

        with pytest.raises(StockError) as exc:
            stock.reserve('Q-B', stocked_product, 6)

        assert exc.value.code == 'INSUFFICIENT_AVAILABLE'
        assert exc.value.available == 5
        assert exc.value.requested == 6
        stocked_product.refresh_from_db()
        assert stocked_product.reserved_stock == 45

    def test_reserve_exactly_available(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 50)

        assert stock.available(stocked_product) == 0

    @pytest.mark.parametrize('quantity', [0, -3])
    def test_reserve_invalid_quantity(self, stocked_product, quantity):
        with pytest.raises(StockError) as exc:
            stock.reserve('Q-A', stocked_product, quantity)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_reserve_twice_for_same_quotation(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 5)

        with pytest.raises(StockError) as exc:
            stock.reserve('Q-A', stocked_product, 5)

        assert exc.value.code == 'ALREADY_RESERVED'
        stocked_product.refresh_from_db()
        assert stocked_product.reserved_stock == 5

    def test_reserve_again_after_release(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 5)
        stock.release('Q-A', stocked_product)

        stock.reserve('Q-A', stocked_product, 8)

        stocked_product.refresh_from_db()
        assert stocked_product.reserved_stock == 8
        assert QuotationReservation.objects.filter(quotation_id='Q-A').count() == 2

    def test_reserve_unknown_product(self, db):
        with pytest.raises(StockError) as exc:
            stock.reserve('Q-A', 999999, 1)

        assert exc.value.code == 'NOT_FOUND'


class TestRelease:
    """Tests for stock.release()."""

    def test_release_restores_available(self, stocked_product):
        before = stock.available(stocked_product)
        stock.reserve('Q-A', stocked_product, 10)
        reservation = stock.release('Q-A', stocked_product)

        assert reservation.status == ReservationStatus.RELEASED
        assert reservation.released_at is not None
        assert stock.available(stocked_product) == before

    def test_release_is_idempotent(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 10)
        stock.reserve('Q-B', stocked_product, 4)

        first = stock.release('Q-A', stocked_product)
        second = stock.release('Q-A', stocked_product)

        stocked_product.refresh_from_db()
        assert first.pk == second.pk
        assert stocked_product.reserved_stock == 4
        released = StockMovement.objects.filter(action_type=ActionType.QUOTATION_RELEASED)
        assert released.count() == 1

    def test_release_without_reservation(self, stocked_product):
        with pytest.raises(StockError) as exc:
            stock.release('Q-NONE', stocked_product)

        assert exc.value.code == 'NOT_FOUND'

    def test_release_by_id(self, stocked_product):
        reservation = stock.reserve('Q-A', stocked_product, 10)

        released = stock.release_reservation(reservation.pk)
        again = stock.release_reservation(reservation.pk)

        stocked_product.refresh_from_db()
        assert released.status == again.status == ReservationStatus.RELEASED
        assert stocked_product.reserved_stock == 0

    def test_release_old_id_leaves_newer_reservation(self, stocked_product):
        old = stock.reserve('Q-A', stocked_product, 5)
        stock.release('Q-A', stocked_product)
        stock.reserve('Q-A', stocked_product, 7)

        stock.release_reservation(old.pk)

        stocked_product.refresh_from_db()
        assert stocked_product.reserved_stock == 7

    def test_release_unknown_id(self, db):
        with pytest.raises(StockError) as exc:
            stock.release_reservation(424242)

        assert exc.value.code == 'NOT_FOUND'

    def test_release_clamps_drifted_aggregate(self, stocked_product):
        """A reserved_stock smaller than the reservation never goes negative."""
        stock.reserve('Q-A', stocked_product, 10)
        type(stocked_product).objects.filter(pk=stocked_product.pk).update(reserved_stock=3)

        stock.release('Q-A', stocked_product)

        stocked_product.refresh_from_db()
        assert stocked_product.reserved_stock == 0


class TestScenario:
    """Receive, reserve, adjust, reject, release."""

    def test_full_walkthrough(self, product):
        movement = stock.receive_purchase(product, 50, unit_cost=Decimal('100'))
        assert (movement.quantity_before, movement.quantity_change, movement.quantity_after) == (0, 50, 50)

        stock.reserve('quotation_A', product, 10)
        assert stock.available(product) == 40

        movement = stock.apply_adjustment(product, 'remove', 5, 'damage')
        assert (movement.quantity_before, movement.quantity_change, movement.quantity_after) == (50, -5, 45)
        assert stock.available(product) == 35

        count = StockMovement.objects.count()
        with pytest.raises(StockError) as exc:
            stock.apply_adjustment(product, 'remove', 100, 'loss')
        assert exc.value.code == 'INVALID_QUANTITY'
        assert StockMovement.objects.count() == count
        product.refresh_from_db()
        assert product.stock_quantity == 45

        stock.release('quotation_A', product)
        product.refresh_from_db()
        assert product.reserved_stock == 0
        assert stock.available(product) == 45

        stock.release('quotation_A', product)
        product.refresh_from_db()
        assert product.reserved_stock == 0


class TestReservedBound:
    """reserved_stock never exceeds stock_quantity."""

    def test_sale_cannot_eat_reserved_stock(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 10)

        with pytest.raises(StockError) as exc:
            stock.sell(stocked_product, 45)

        assert exc.value.code == 'INVALID_QUANTITY'
        stocked_product.refresh_from_db()
        assert stocked_product.stock_quantity == 50

    def test_sale_of_unreserved_stock(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 10)

        stock.sell(stocked_product, 40)

        stocked_product.refresh_from_db()
        assert stocked_product.stock_quantity == 10
        assert stocked_product.reserved_stock == 10
        assert stock.available(stocked_product) == 0


class TestConvert:
    """Tests for stock.convert()."""

    def test_convert_releases_and_sells(self, stocked_product, user):
        stock.reserve('Q-A', stocked_product, 10)

        movement = stock.convert('Q-A', stocked_product, reference_id='SO-1', user=user)

        stocked_product.refresh_from_db()
        assert movement.action_type == ActionType.SALE
        assert movement.quantity_change == -10
        assert movement.reference_id == 'SO-1'
        assert movement.user == user
        assert stocked_product.stock_quantity == 40
        assert stocked_product.reserved_stock == 0
        assert stock.available(stocked_product) == 40

        actions = list(stock.movements(stocked_product).values_list('action_type', flat=True))
        assert actions == [
            ActionType.PURCHASE,
            ActionType.QUOTATION_RESERVED,
            ActionType.QUOTATION_RELEASED,
            ActionType.SALE,
        ]

    def test_convert_without_reservation(self, stocked_product):
        with pytest.raises(StockError) as exc:
            stock.convert('Q-NONE', stocked_product)

        assert exc.value.code == 'NOT_FOUND'

    def test_convert_twice(self, stocked_product):
        stock.reserve('Q-A', stocked_product, 10)
        stock.convert('Q-A', stocked_product)

        with pytest.raises(StockError) as exc:
            stock.convert('Q-A', stocked_product)

        assert exc.value.code == 'NOT_FOUND'
        stocked_product.refresh_from_db()
        assert stocked_product.stock_quantity == 40


class TestListing:

    def test_reservations_by_quotation(self, stocked_product, other_product):
        stock.receive_purchase(other_product, 5, unit_cost=Decimal('10'))
        stock.reserve('Q-A', stocked_product, 1)
        stock.reserve('Q-A', other_product, 2)
        stock.reserve('Q-B', stocked_product, 3)
        stock.release('Q-A', other_product)

        assert stock.reservations(quotation_id='Q-A').count() == 2
        assert stock.reservations(quotation_id='Q-A', active_only=True).count() == 1
        assert stock.reservations(product=stocked_product).count() == 2
