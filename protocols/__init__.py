"""
Stockledger Protocols.

Defines interfaces for external system integration.
"""

from stockledger.protocols.invoice import (
    ExtractedInvoice,
    ExtractedItem,
    InvoiceExtractionError,
    InvoiceExtractor,
)

__all__ = [
    "ExtractedInvoice",
    "ExtractedItem",
    "InvoiceExtractionError",
    "InvoiceExtractor",
]
