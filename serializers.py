from dataclasses import asdict

from rest_framework import serializers

from stockledger.models import (
    ActionType,
    LowStockAlert,
    PaymentStatus,
    QuotationReservation,
    StockMovement,
)


# Quantities are plain integers here; the stock service rejects zero and
# negatives with INVALID_QUANTITY.

class PurchaseCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    vendor_name = serializers.CharField(required=False, allow_blank=True, default='')
    gst_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True, default=None)
    invoice_number = serializers.CharField(required=False, allow_blank=True, default='')
    invoice_date = serializers.DateField(required=False, allow_null=True, default=None)
    purchase_date = serializers.DateField(required=False, allow_null=True, default=None)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    reason = serializers.CharField(required=False, allow_blank=True, default='Purchase from vendor')


class AdjustmentCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    type = serializers.CharField()
    quantity = serializers.IntegerField()
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    serial_numbers = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class SaleCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    reference_type = serializers.CharField(required=False, allow_blank=True, default='order')
    reference_id = serializers.CharField(required=False, allow_blank=True, default='')


class ReservationCreateSerializer(serializers.Serializer):
    quotation_id = serializers.CharField(max_length=64)
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()


class ReservationConvertSerializer(serializers.Serializer):
    quotation_id = serializers.CharField(max_length=64)
    product_id = serializers.IntegerField()
    reference_type = serializers.CharField(required=False, allow_blank=True, default='order')
    reference_id = serializers.CharField(required=False, allow_blank=True, default='')


class MovementFilterSerializer(serializers.Serializer):
    action_type = serializers.ChoiceField(choices=ActionType.choices, required=False)
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get('start') and attrs.get('end') and attrs['start'] > attrs['end']:
            raise serializers.ValidationError('start must not be after end')
        return attrs


class InvoiceUploadSerializer(serializers.Serializer):
    file = serializers.FileField()


class StockMovementSerializer(serializers.ModelSerializer):
    class Meta:
        model = StockMovement
        fields = [
            'id', 'product', 'action_type', 'quantity_change', 'quantity_before',
            'quantity_after', 'reason', 'notes', 'reference_type', 'reference_id',
            'created_at', 'user',
        ]


class QuotationReservationSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuotationReservation
        fields = ['id', 'quotation_id', 'product', 'quantity', 'status', 'reserved_at', 'released_at']


class LowStockAlertSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = LowStockAlert
        fields = [
            'id', 'product', 'product_name', 'alert_type', 'current_stock', 'minimum_level',
            'is_acknowledged', 'acknowledged_at', 'created_at',
        ]


def serialize_invoice(invoice) -> dict:
    """ExtractedInvoice as JSON-ready data."""
    data = asdict(invoice)
    data['invoice_date'] = invoice.invoice_date.isoformat() if invoice.invoice_date else None
    for key in ('subtotal', 'gst_amount', 'total_amount'):
        data[key] = str(data[key]) if data[key] is not None else None
    for item in data['items']:
        item['unit_cost'] = str(item['unit_cost'])
        item['gst_rate'] = str(item['gst_rate']) if item['gst_rate'] is not None else None
    return data

