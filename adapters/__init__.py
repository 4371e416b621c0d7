"""
Stockledger Adapters.

Implementations of protocols for external systems.
"""

from stockledger.adapters.extractor import get_invoice_extractor, reset_invoice_extractor
from stockledger.adapters.noop import NoopInvoiceExtractor

__all__ = [
    "NoopInvoiceExtractor",
    "get_invoice_extractor",
    "reset_invoice_extractor",
]
