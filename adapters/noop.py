"""
Noop Invoice Extractor — Stub adapter for development and testing.

Usage in settings.py:
    STOCKLEDGER = {
        "INVOICE_EXTRACTOR": "stockledger.adapters.noop.NoopInvoiceExtractor",
    }

It reads nothing: every document yields an empty ExtractedInvoice that
the operator fills in by hand.
"""

from __future__ import annotations

from stockledger.protocols.invoice import ExtractedInvoice, InvoiceExtractionError


class NoopInvoiceExtractor:
    """No-operation invoice extractor."""

    def extract(self, content: bytes, content_type: str = "application/pdf") -> ExtractedInvoice:
        """
        Return an empty invoice.

        Raises:
            InvoiceExtractionError: If content is empty
        """
        if not content:
            raise InvoiceExtractionError("Empty document")
        return ExtractedInvoice()
