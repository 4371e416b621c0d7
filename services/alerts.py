"""
Stock alerts — raise and acknowledge low-stock alerts.

Usage:
    from stockledger.services.alerts import generate_alerts

    # Run periodically (cron) or after stock changes
    created = generate_alerts()
    # Returns the LowStockAlert rows created by this run
"""

import logging

from django.utils import timezone

from stockledger.conf import stockledger_settings
from stockledger.models.alert import LowStockAlert
from stockledger.models.enums import AlertType
from stockledger.models.product import Product

logger = logging.getLogger('stockledger')


def pending_alerts(product=None):
    """
    Products that need an alert and don't have an open one.

    Yields:
        (product, alert_type) tuples
    """
    qs = Product.objects.needs_reorder().exclude(stock_alerts__is_acknowledged=False)
    if product is not None:
        qs = qs.filter(pk=getattr(product, 'pk', product))

    for candidate in qs.order_by('pk').iterator(chunk_size=stockledger_settings.ALERT_BATCH_SIZE):
        alert_type = AlertType.OUT_OF_STOCK if candidate.available_qty <= 0 else AlertType.LOW_STOCK
        yield candidate, alert_type


def generate_alerts(product=None) -> list[LowStockAlert]:
    """
    Create one open alert per product at or below its minimum level.

    A product with an unacknowledged alert is skipped, so running this
    repeatedly never duplicates alerts.

    Args:
        product: Optional product to check (None = all).

    Returns:
        List of created LowStockAlert.
    """
    created = []
    for candidate, alert_type in list(pending_alerts(product)):
        alert = LowStockAlert.objects.create(
            product=candidate,
            alert_type=alert_type,
            current_stock=candidate.available_qty,
            minimum_level=candidate.minimum_stock_level,
        )
        created.append(alert)
        logger.warning(
            "stock.alert.triggered",
            extra={
                "alert_id": alert.pk,
                "product_id": candidate.pk,
                "alert_type": str(alert_type),
                "available": candidate.available_qty,
                "minimum_level": candidate.minimum_stock_level,
            },
        )
    return created


def acknowledge(alert, user=None) -> LowStockAlert:
    """Mark one alert acknowledged. Already acknowledged alerts are left as is."""
    if not isinstance(alert, LowStockAlert):
        alert = LowStockAlert.objects.get(pk=alert)
    if alert.is_acknowledged:
        return alert

    alert.is_acknowledged = True
    alert.acknowledged_at = timezone.now()
    alert.acknowledged_by = user
    alert.save(update_fields=['is_acknowledged', 'acknowledged_at', 'acknowledged_by'])
    logger.info(
        "stock.alert.acknowledged",
        extra={"alert_id": alert.pk, "product_id": alert.product_id},
    )
    return alert


def acknowledge_all(user=None) -> int:
    """Acknowledge every open alert. Returns the number acknowledged."""
    count = LowStockAlert.objects.open().update(
        is_acknowledged=True,
        acknowledged_at=timezone.now(),
        acknowledged_by=user,
    )
    if count:
        logger.info("stock.alert.acknowledged_all", extra={"count": count})
    return count
