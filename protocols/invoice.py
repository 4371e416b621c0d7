"""
Invoice Extraction Protocol — Interface for purchase-invoice parsing.

Stockledger defines this protocol; a document-AI service (or anything
else that reads invoices) implements it. Extraction is best effort:
the result is shown to an operator who corrects it before posting
with stock.receive_invoice().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ExtractedItem:
    """One invoice line."""

    description: str
    quantity: int
    unit_cost: Decimal
    gst_rate: Decimal | None = None
    sku: str | None = None
    hsn_code: str | None = None


@dataclass(frozen=True)
class ExtractedInvoice:
    """Structured data read from a purchase invoice."""

    vendor_name: str = ""
    invoice_number: str = ""
    invoice_date: date | None = None
    items: list[ExtractedItem] = field(default_factory=list)
    subtotal: Decimal | None = None
    gst_amount: Decimal | None = None
    total_amount: Decimal | None = None


class InvoiceExtractionError(Exception):
    """The extractor could not read the document at all."""


@runtime_checkable
class InvoiceExtractor(Protocol):
    """
    Protocol for invoice extraction.

    Implementations receive the raw uploaded bytes and return whatever
    they could read. Fields that couldn't be read are left empty.
    """

    def extract(self, content: bytes, content_type: str = "application/pdf") -> ExtractedInvoice:
        """
        Read an invoice document.

        Args:
            content: File bytes (PDF or image)
            content_type: MIME type of content

        Returns:
            ExtractedInvoice

        Raises:
            InvoiceExtractionError: If the document can't be processed
        """
        ...
