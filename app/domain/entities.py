"""
Domain entities for the book inventory.

Entities are objects with a unique identity that runs through time and
different representations. They are the core building blocks of the domain.
"""

from dataclasses import dataclass
from datetime import date

from .value_objects import BookDraft


@dataclass(frozen=True)
class Book:
    """
    Represents a book record in the inventory.

    The identity (``id``) is assigned by the persistence store when the
    record is inserted and never changes afterwards. Edits replace the
    whole record through ``with_changes``; the entity itself is immutable.
    """

    id: int
    """Unique identifier assigned by the store"""

    title: str
    """Book title"""

    author: str
    """Author name (single free-text value)"""

    genre: str
    """Genre (single free-text value)"""

    publication_date: date
    """Publication date"""

    isbn: str
    """ISBN-10 or ISBN-13 shaped string"""

    stock: int = 0
    """Number of copies available"""

    def __post_init__(self) -> None:
        """Validate book data."""
        if self.stock < 0:
            raise ValueError(f"stock cannot be negative, got {self.stock}")

    def __eq__(self, other: object) -> bool:
        """Two books are equal if they have the same ID."""
        if not isinstance(other, Book):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on book ID."""
        return hash(self.id)

    def has_same_fields(self, other: "Book") -> bool:
        """Compare every field, not only the identity."""
        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.genre == other.genre
            and self.publication_date == other.publication_date
            and self.isbn == other.isbn
            and self.stock == other.stock
        )

    def with_changes(self, draft: BookDraft) -> "Book":
        """
        Return a new Book with the same ID and the draft's fields.

        The draft must already be validated; its raw values are coerced to
        the entity's types here.
        """
        return Book.from_draft(self.id, draft)

    @staticmethod
    def from_draft(book_id: int, draft: BookDraft) -> "Book":
        """
        Build a Book from a validated draft and a store-assigned ID.

        Args:
            book_id: Identifier assigned by the persistence store
            draft: Validated field values

        Returns:
            A new Book instance
        """
        return Book(
            id=book_id,
            title=draft.title,
            author=draft.author,
            genre=draft.genre,
            publication_date=draft.parsed_publication_date(),
            isbn=draft.isbn,
            stock=int(draft.stock),
        )

    def to_draft(self) -> BookDraft:
        """Convert back to a draft (e.g. to pre-fill an edit form)."""
        return BookDraft(
            title=self.title,
            author=self.author,
            genre=self.genre,
            publication_date=self.publication_date.isoformat(),
            isbn=self.isbn,
            stock=self.stock,
        )
