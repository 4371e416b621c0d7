"""
Stockledger configuration.

Usage in settings.py:
    STOCKLEDGER = {
        "INVOICE_EXTRACTOR": "myshop.extraction.GeminiInvoiceExtractor",
        "CONFLICT_RETRIES": 3,
        "TRANSIENT_RETRIES": 2,
        "DEFAULT_GST_RATE": Decimal("18"),
    }
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from django.conf import settings


@dataclass
class StockledgerSettings:
    """Stockledger configuration settings."""

    # Invoice extraction backend (dotted path)
    INVOICE_EXTRACTOR: str = "stockledger.adapters.noop.NoopInvoiceExtractor"

    # Re-runs of a read-compute-write cycle after a lost compare-and-swap
    CONFLICT_RETRIES: int = 3

    # Retries on store errors, idempotent operations only
    TRANSIENT_RETRIES: int = 2

    # GST percentage applied to purchases that don't carry one
    DEFAULT_GST_RATE: Decimal = field(default_factory=lambda: Decimal("18"))

    # Products scanned per chunk when generating low-stock alerts
    ALERT_BATCH_SIZE: int = 200


def get_stockledger_settings() -> StockledgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKLEDGER", {})
    return StockledgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockledgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockledger_settings(), name)


stockledger_settings = _LazySettings()
