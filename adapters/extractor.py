"""
Invoice extractor loader.

Usage:
    from stockledger.adapters import get_invoice_extractor

    invoice = get_invoice_extractor().extract(upload.read(), upload.content_type)

Settings:
    STOCKLEDGER = {
        "INVOICE_EXTRACTOR": "myshop.extraction.GeminiInvoiceExtractor",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from stockledger.conf import stockledger_settings
from stockledger.protocols.invoice import InvoiceExtractor

logger = logging.getLogger(__name__)


# Cached extractor instance
_lock = threading.Lock()
_invoice_extractor: InvoiceExtractor | None = None


def get_invoice_extractor() -> InvoiceExtractor:
    """
    Return the configured invoice extractor.

    Raises:
        ImproperlyConfigured: If INVOICE_EXTRACTOR is empty, can't be
            imported or doesn't implement InvoiceExtractor
    """
    global _invoice_extractor

    if _invoice_extractor is None:
        with _lock:
            if _invoice_extractor is None:  # double-checked
                extractor_path = stockledger_settings.INVOICE_EXTRACTOR

                if not extractor_path:
                    raise ImproperlyConfigured(
                        "STOCKLEDGER['INVOICE_EXTRACTOR'] must be configured. "
                        "Example: 'stockledger.adapters.noop.NoopInvoiceExtractor'"
                    )

                try:
                    extractor = import_string(extractor_path)()
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import invoice extractor '{extractor_path}': {e}"
                    ) from e

                if not isinstance(extractor, InvoiceExtractor):
                    raise ImproperlyConfigured(
                        f"'{extractor_path}' does not implement InvoiceExtractor"
                    )
                _invoice_extractor = extractor
                logger.debug("Loaded invoice extractor: %s", extractor_path)

    return _invoice_extractor


def reset_invoice_extractor() -> None:
    """Reset the cached extractor. Useful for testing."""
    global _invoice_extractor
    _invoice_extractor = None
