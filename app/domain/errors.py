"""
Domain error taxonomy.

Every failure in the inventory is per-operation and recoverable by
retrying the user action. The classes also derive from the built-in
ValueError / RuntimeError so callers catching those keep working.
"""

from typing import Optional


class InventoryError(Exception):
    """Base class for inventory domain errors."""


class FetchFailure(InventoryError, RuntimeError):
    """Reading from the catalog (list or search) failed."""


class ValidationFailure(InventoryError, ValueError):
    """A submitted record was rejected by the validator."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PersistenceFailure(InventoryError, RuntimeError):
    """An insert, update or delete was rejected by the store."""


class BookNotFound(PersistenceFailure):
    """The targeted book does not exist."""

    def __init__(self, book_id: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"Book with id '{book_id}' not found")
        self.book_id = book_id
