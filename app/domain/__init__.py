"""
Domain layer - Core business logic and entities.

This layer contains the business entities, value objects, and defines
the ports (interfaces) that the infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Book
from .search_state import SearchState
from .value_objects import BookDraft, SearchMode, ValidationResult

__all__ = [
    # Entities
    "Book",
    # Value Objects
    "BookDraft",
    "SearchMode",
    "SearchState",
    "ValidationResult",
]
