"""Ledger error taxonomy."""

from typing import Optional


class LedgerError(Exception):
    """Base class for inventory ledger errors."""
    pass


class ProductNotFoundError(LedgerError):
    """Exception raised when the referenced product doesn't exist."""
    pass


class SaleNotFoundError(LedgerError):
    """Exception raised when the referenced sale doesn't exist."""
    pass


class InsufficientStockError(LedgerError):
    """Exception raised when there's not enough stock to fulfill a sale."""
    pass


class StorageError(LedgerError):
    """Exception raised when the ledger snapshot can't be read or written."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.original_exception = original_exception
