"""
Tests for purchase, adjustment, sale and return intake.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.utils import timezone

from stockledger import stock, StockError
from stockledger.models import (
    ActionType,
    Purchase,
    StockAdjustment,
    StockMovement,
)
from stockledger.models.purchase import PurchaseManager, compute_purchase_totals
from stockledger.protocols import ExtractedInvoice, ExtractedItem


pytestmark = pytest.mark.django_db


class TestReceivePurchase:
    """Tests for stock.receive_purchase()."""

    def test_purchase_creates_record_and_movement(self, product, user):
        movement = stock.receive_purchase(
            product, 10, Decimal('250.00'),
            vendor_name='Prama Hikvision',
            invoice_number='INV-778',
            user=user,
        )

        purchase = Purchase.objects.get()
        assert movement.action_type == ActionType.PURCHASE
        assert movement.reference_type == 'purchase'
        assert movement.reference_id == str(purchase.pk)
        assert movement.reason == 'Purchase from vendor'
        assert movement.notes == 'Invoice: INV-778'
        assert movement.user == user
        assert purchase.vendor_name == 'Prama Hikvision'
        assert purchase.created_by == user

    def test_purchase_sets_last_purchase_price(self, product):
        stock.receive_purchase(product, 1, Decimal('99.50'))
        stock.receive_purchase(product, 1, Decimal('101.25'))

        product.refresh_from_db()
        assert product.last_purchase_price == Decimal('101.25')

    def test_purchase_totals_with_default_gst(self, product):
        stock.receive_purchase(product, 3, Decimal('100'))

        purchase = Purchase.objects.get()
        assert purchase.gst_rate == Decimal('18')
        assert purchase.gst_amount == Decimal('54.00')
        assert purchase.total_cost == Decimal('354.00')

    def test_purchase_without_invoice(self, product):
        movement = stock.receive_purchase(product, 1, Decimal('10'))

        assert movement.notes == 'Invoice: N/A'

    def test_purchase_numbers_are_sequential(self, product):
        stock.receive_purchase(product, 1, Decimal('10'))
        stock.receive_purchase(product, 1, Decimal('10'))

        numbers = sorted(Purchase.objects.values_list('purchase_number', flat=True))
        assert numbers[0].endswith('-0001')
        assert numbers[1].endswith('-0002')
        assert numbers[0].startswith('PUR-')

    def test_purchase_numbers_pass_9999(self, product):
        prefix = f"PUR-{timezone.localdate():%Y%m%d}-"
        Purchase.objects.create(
            purchase_number=f'{prefix}9999',
            product=product,
            quantity=1,
            unit_cost=Decimal('10'),
            total_cost=Decimal('11.80'),
        )

        stock.receive_purchase(product, 1, Decimal('10'))
        stock.receive_purchase(product, 1, Decimal('10'))

        numbers = set(Purchase.objects.values_list('purchase_number', flat=True))
        assert numbers == {f'{prefix}9999', f'{prefix}10000', f'{prefix}10001'}

    def test_purchase_number_collision_is_retried(self, product, other_product, monkeypatch):
        stock.receive_purchase(other_product, 1, Decimal('10'))
        taken = Purchase.objects.get().purchase_number
        real_next_number = PurchaseManager.next_number
        calls = []

        def next_number(self, on=None):
            # First attempt races with the purchase above
            calls.append(on)
            return taken if len(calls) == 1 else real_next_number(self, on)

        monkeypatch.setattr(PurchaseManager, 'next_number', next_number)

        movement = stock.receive_purchase(product, 4, Decimal('10'))

        assert len(calls) == 2
        assert movement.quantity_after == 4
        assert Purchase.objects.count() == 2
        assert StockMovement.objects.filter(product=product).count() == 1

    def test_purchase_number_collision_gives_up_as_conflict(self, product, other_product, monkeypatch, settings):
        settings.STOCKLEDGER = {'CONFLICT_RETRIES': 2}
        stock.receive_purchase(other_product, 1, Decimal('10'))
        taken = Purchase.objects.get().purchase_number
        monkeypatch.setattr(PurchaseManager, 'next_number', lambda self, on=None: taken)

        with pytest.raises(StockError) as exc:
            stock.receive_purchase(product, 4, Decimal('10'))

        assert exc.value.code == 'CONFLICT'
        assert exc.value.data['purchase_number'] == taken
        product.refresh_from_db()
        assert product.stock_quantity == 0

    @pytest.mark.parametrize('quantity', [0, -5, 1.5, True])
    def test_purchase_invalid_quantity(self, product, quantity):
        with pytest.raises(StockError) as exc:
            stock.receive_purchase(product, quantity, Decimal('10'))

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not Purchase.objects.exists()

    def test_purchase_negative_cost(self, product):
        with pytest.raises(StockError) as exc:
            stock.receive_purchase(product, 1, Decimal('-1'))

        assert exc.value.code == 'INVALID_COST'
        assert not StockMovement.objects.exists()

    def test_purchase_unknown_product(self, db):
        with pytest.raises(StockError) as exc:
            stock.receive_purchase(999999, 1, Decimal('10'))

        assert exc.value.code == 'NOT_FOUND'
        assert not Purchase.objects.exists()


class TestPurchaseTotals:

    def test_rounding(self):
        gst, total = compute_purchase_totals(1, Decimal('10.05'), Decimal('18'))

        assert gst == Decimal('1.81')
        assert total == Decimal('11.86')

    def test_zero_rate(self):
        assert compute_purchase_totals(2, Decimal('5'), Decimal('0')) == (Decimal('0.00'), Decimal('10.00'))


class TestApplyAdjustment:
    """Tests for stock.apply_adjustment()."""

    def test_add(self, product):
        movement = stock.apply_adjustment(product, 'add', 7, 'initial_stock')

        assert movement.action_type == ActionType.ADJUSTMENT
        assert movement.quantity_change == 7
        assert movement.adjustment.quantity == 7

    def test_remove(self, stocked_product):
        movement = stock.apply_adjustment(stocked_product, 'remove', 5, 'damage')

        assert movement.quantity_change == -5
        assert movement.quantity_after == 45

    def test_remove_below_zero(self, stocked_product):
        with pytest.raises(StockError) as exc:
            stock.apply_adjustment(stocked_product, 'remove', 51, 'loss')

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not StockAdjustment.objects.exists()

    def test_serial_numbers_in_notes(self, product, user):
        movement = stock.apply_adjustment(
            product, 'add', 2, 'found',
            notes='Found in back room',
            serial_numbers=['SN-001', ' SN-002 ', ''],
            user=user,
        )

        adjustment = movement.adjustment
        assert adjustment.serial_numbers == ['SN-001', 'SN-002']
        assert adjustment.notes == 'Found in back room\n\nSerial Numbers:\nSN-001\nSN-002'
        assert movement.notes == adjustment.notes
        assert adjustment.adjusted_by == user

    def test_reason_required(self, product):
        with pytest.raises(StockError) as exc:
            stock.apply_adjustment(product, 'add', 1, '')

        assert exc.value.code == 'REASON_REQUIRED'

    def test_reason_must_be_known(self, product):
        with pytest.raises(StockError) as exc:
            stock.apply_adjustment(product, 'add', 1, 'because')

        assert exc.value.code == 'INVALID_REASON'

    def test_type_must_be_add_or_remove(self, product):
        with pytest.raises(StockError) as exc:
            stock.apply_adjustment(product, 'set', 1, 'correction')

        assert exc.value.code == 'INVALID_ADJUSTMENT_TYPE'

    def test_zero_quantity(self, product):
        with pytest.raises(StockError) as exc:
            stock.apply_adjustment(product, 'add', 0, 'correction')

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not StockMovement.objects.exists()


class TestSaleAndReturn:

    def test_sell(self, stocked_product):
        movement = stock.sell(stocked_product, 5, reference_id='SO-9')

        assert movement.action_type == ActionType.SALE
        assert movement.quantity_change == -5
        assert movement.reference_type == 'order'
        assert movement.reference_id == 'SO-9'

    def test_sell_more_than_on_hand(self, stocked_product):
        with pytest.raises(StockError) as exc:
            stock.sell(stocked_product, 51)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_return(self, product):
        movement = stock.receive_return(product, 2, reference_id='SO-9')

        assert movement.action_type == ActionType.RETURN
        assert movement.quantity_after == 2


class TestReceiveInvoice:
    """Tests for stock.receive_invoice()."""

    def _invoice(self, *items):
        return ExtractedInvoice(
            vendor_name='CP Plus Distributor',
            invoice_number='CP-2024-118',
            invoice_date=date(2024, 3, 1),
            items=list(items),
        )

    def test_posts_mapped_lines(self, product, other_product):
        invoice = self._invoice(
            ExtractedItem(description='Dome 4MP', quantity=10, unit_cost=Decimal('1200')),
            ExtractedItem(description='Cable roll', quantity=3, unit_cost=Decimal('900')),
            ExtractedItem(description='NVR 8ch', quantity=2, unit_cost=Decimal('5000'), gst_rate=Decimal('28')),
        )

        movements = stock.receive_invoice(invoice, {0: product, 2: other_product.pk})

        assert len(movements) == 2
        product.refresh_from_db()
        other_product.refresh_from_db()
        assert product.stock_quantity == 10
        assert other_product.stock_quantity == 2
        nvr_purchase = Purchase.objects.get(product=other_product)
        assert nvr_purchase.gst_rate == Decimal('28')
        assert nvr_purchase.invoice_number == 'CP-2024-118'
        assert nvr_purchase.vendor_name == 'CP Plus Distributor'

    def test_bad_line_posts_nothing(self, product, other_product):
        invoice = self._invoice(
            ExtractedItem(description='Dome 4MP', quantity=10, unit_cost=Decimal('1200')),
            ExtractedItem(description='NVR 8ch', quantity=0, unit_cost=Decimal('5000')),
        )

        with pytest.raises(StockError):
            stock.receive_invoice(invoice, {0: product, 1: other_product})

        assert not Purchase.objects.exists()
        product.refresh_from_db()
        assert product.stock_quantity == 0
