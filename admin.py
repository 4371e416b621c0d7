"""
Stockledger Admin.

- Product: editable catalog fields, stock aggregates read-only
- StockMovement: read-only audit trail
- StockAdjustment: read-only
- QuotationReservation: read-only with "release" action
- Purchase: read-only (create through stock.receive_purchase)
- LowStockAlert: read-only with "acknowledge" action
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from stockledger.exceptions import StockError
from stockledger.models import (
    LowStockAlert,
    Product,
    Purchase,
    QuotationReservation,
    ReservationStatus,
    StockAdjustment,
    StockMovement,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdmin(admin.ModelAdmin):
    """Rows only change through the stock service."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# PRODUCT ADMIN
# =========================================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin — stock fields are owned by the ledger."""

    list_display = ['name', 'sku', 'category', 'stock_quantity', 'reserved_stock',
                    'available_display', 'status_display', 'minimum_stock_level']
    list_filter = ['category']
    search_fields = ['name', 'sku']
    readonly_fields = ['stock_quantity', 'reserved_stock', 'last_purchase_price',
                       'created_at', 'updated_at']

    @admin.display(description=_('Available'))
    def available_display(self, obj):
        return obj.available

    @admin.display(description=_('Status'))
    def status_display(self, obj):
        return obj.stock_status


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdmin):
    """StockMovement admin — immutable audit trail."""

    list_display = ['created_at', 'product', 'action_type', 'quantity_change',
                    'quantity_before', 'quantity_after', 'reason', 'user']
    list_filter = ['action_type', 'created_at']
    search_fields = ['product__name', 'product__sku', 'reason', 'reference_id']
    date_hierarchy = 'created_at'
    list_select_related = ['product', 'user']


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(ReadOnlyAdmin):
    list_display = ['created_at', 'product', 'adjustment_type', 'quantity', 'reason', 'adjusted_by']
    list_filter = ['adjustment_type', 'reason']
    search_fields = ['product__name', 'notes']


# =========================================================================
# RESERVATION ADMIN (read-only with release action)
# =========================================================================

@admin.register(QuotationReservation)
class QuotationReservationAdmin(ReadOnlyAdmin):
    """QuotationReservation admin — read-only with release action."""

    list_display = ['id', 'quotation_id', 'product', 'quantity', 'status',
                    'reserved_at', 'released_at']
    list_filter = ['status']
    search_fields = ['quotation_id', 'product__name']
    actions = ['release_reservations']

    @admin.action(description=_('Release selected reservations'))
    def release_reservations(self, request, queryset):
        from stockledger import stock

        count = 0
        for reservation in queryset.filter(status=ReservationStatus.RESERVED):
            try:
                stock.release(reservation.quotation_id, reservation.product_id,
                              reason='Released via admin')
                count += 1
            except StockError as exc:
                logger.warning("release_reservations: failed to release %s: %s", reservation.pk, exc)

        self.message_user(request, _('{count} reservation(s) released.').format(count=count))


@admin.register(Purchase)
class PurchaseAdmin(ReadOnlyAdmin):
    list_display = ['purchase_number', 'vendor_name', 'product', 'quantity', 'unit_cost',
                    'total_cost', 'payment_status', 'purchase_date']
    list_filter = ['payment_status', 'purchase_date']
    search_fields = ['purchase_number', 'vendor_name', 'invoice_number']


# =========================================================================
# ALERT ADMIN
# =========================================================================

@admin.register(LowStockAlert)
class LowStockAlertAdmin(ReadOnlyAdmin):
    list_display = ['created_at', 'product', 'alert_type', 'current_stock',
                    'minimum_level', 'is_acknowledged']
    list_filter = ['alert_type', 'is_acknowledged']
    actions = ['acknowledge_alerts']

    @admin.action(description=_('Acknowledge selected alerts'))
    def acknowledge_alerts(self, request, queryset):
        from stockledger.services.alerts import acknowledge

        user = request.user if request.user.is_authenticated else None
        alerts = list(queryset.filter(is_acknowledged=False))
        for alert in alerts:
            acknowledge(alert, user=user)

        self.message_user(
            request,
            _('{count} alert(s) acknowledged.').format(count=len(alerts)),
            messages.SUCCESS,
        )
