"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.
"""

from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from .entities import Book
from .value_objects import BookDraft, ValidationResult

T = TypeVar("T")


class BookCatalogRepository(Protocol):
    """
    Port for persisting and retrieving books from the inventory.

    This repository is responsible for CRUD operations on Book entities
    and for the two read paths the search coordinator relies on: the full
    listing and the prefix search. It abstracts away the persistence
    mechanism (SQLite, a remote HTTP API, etc.).
    """

    def list_all(self) -> List[Book]:
        """
        Retrieve every book in the inventory.

        Returns:
            All books, in insertion order

        Raises:
            RuntimeError: If the store cannot be read
        """
        ...

    def search_by_prefix(self, term: str) -> List[Book]:
        """
        Find books whose title, author or genre starts with ``term``.

        Matching is case-insensitive and anchored at the start of the
        field (trailing wildcard only). The caller decides whether a term
        is long enough to be worth searching; any non-empty term is
        accepted here.

        Args:
            term: Prefix to match

        Returns:
            Matching books, in insertion order

        Raises:
            ValueError: If term is empty
            RuntimeError: If the store cannot be read
        """
        ...

    def distinct_authors(self) -> List[str]:
        """Return each author name present in the inventory once."""
        ...

    def distinct_genres(self) -> List[str]:
        """Return each genre present in the inventory once."""
        ...

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """
        Retrieve a book by its identifier.

        Returns:
            The Book entity if found, None otherwise
        """
        ...

    def insert(self, draft: BookDraft) -> Book:
        """
        Insert a new record and assign its identifier.

        Args:
            draft: Validated field values

        Returns:
            The stored Book, carrying its new ID

        Raises:
            ValueError: If the record violates store constraints
            RuntimeError: If a database error occurs
        """
        ...

    def update(self, book_id: int, draft: BookDraft) -> bool:
        """
        Replace every field of an existing record except its ID.

        Returns:
            True if the record was updated, False if not found
        """
        ...

    def delete(self, book_id: int) -> bool:
        """
        Delete a record.

        Returns:
            True if the record was deleted, False if not found
        """
        ...

    def count(self) -> int:
        """Total number of records."""
        ...


class BookValidator(Protocol):
    """Port for the field validation collaborator."""

    def __call__(self, draft: BookDraft) -> ValidationResult:
        ...


class ResultDisplay(Protocol):
    """
    Port for whatever renders the current result set.

    Called with the full list every time the displayed set changes.
    """

    def __call__(self, books: List[Book]) -> None:
        ...


class BookExporter(Protocol):
    """Port for serializing a set of books into a downloadable payload."""

    def __call__(self, books: Sequence[Book], fmt: str) -> bytes:
        ...


class FetchScheduler(Protocol):
    """
    Port for running catalog fetches on behalf of the search coordinator.

    A scheduler may run the job immediately or later (e.g. on an event
    loop or worker). Exactly one of the callbacks is called, once, when
    the job finishes. The coordinator does not assume completions arrive
    in submission order.
    """

    def submit(
        self,
        job: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        ...
