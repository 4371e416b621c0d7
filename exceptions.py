"""
Exceptions for Stockledger.

All errors are StockError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class StockError(Exception):
    """
    Structured exception for stock operations.

    Usage:
        try:
            stock.reserve('Q-1001', product, 10)
        except StockError as e:
            if e.code == 'INSUFFICIENT_AVAILABLE':
                print(f"Only {e.available} available")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INVALID_QUANTITY': 'Invalid quantity',
        'INVALID_COST': 'Unit cost must not be negative',
        'INSUFFICIENT_AVAILABLE': 'Requested quantity exceeds available stock',
        'NOT_FOUND': 'Product or reservation not found',
        'ALREADY_RESERVED': 'Quotation already holds a reservation for this product',
        'REASON_REQUIRED': 'Reason is required',
        'INVALID_REASON': 'Unknown adjustment reason',
        'INVALID_ADJUSTMENT_TYPE': 'Adjustment type must be add or remove',
        'CONFLICT': 'Concurrent modification detected',
        'TRANSIENT': 'Stock store unavailable, outcome unknown',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"StockError({self.code!r}, {self.message!r})"

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }
