"""
Validated writes to the inventory.

Each write is checked by the validation collaborator first. A rejected
draft never reaches the repository, and the validator's reason is handed
back to the caller unchanged.
"""

import logging
from typing import Optional

from app.domain.entities import Book
from app.domain.errors import BookNotFound, PersistenceFailure, ValidationFailure
from app.domain.ports import BookCatalogRepository, BookValidator
from app.domain.validation import validate_book
from app.domain.value_objects import BookDraft

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Create, edit and delete book records.

    Usage:
        service = InventoryService(repo)
        book = service.add_book(BookDraft(...))
    """

    def __init__(
        self,
        catalog_repo: BookCatalogRepository,
        validator: BookValidator = validate_book,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._validator = validator

    def get_book(self, book_id: int) -> Optional[Book]:
        return self._catalog_repo.get_by_id(book_id)

    def add_book(self, draft: BookDraft) -> Book:
        """
        Validate and insert a new record.

        Raises:
            ValidationFailure: If the draft is rejected (reason unchanged)
            PersistenceFailure: If the store rejects the insert
        """
        self._check(draft)
        try:
            book = self._catalog_repo.insert(draft)
        except (ValueError, RuntimeError) as e:
            logger.error(f"Insert failed for '{draft.title}': {e}")
            raise PersistenceFailure(f"Failed to add book: {e}") from e

        logger.info(f"Added book #{book.id} '{book.title}'")
        return book

    def update_book(self, book_id: int, draft: BookDraft) -> Book:
        """
        Validate and replace every field of an existing record.

        Raises:
            ValidationFailure: If the draft is rejected (reason unchanged)
            BookNotFound: If no record has this ID
            PersistenceFailure: If the store rejects the update
        """
        self._check(draft)
        try:
            updated = self._catalog_repo.update(book_id, draft)
        except (ValueError, RuntimeError) as e:
            logger.error(f"Update failed for book #{book_id}: {e}")
            raise PersistenceFailure(f"Failed to update book: {e}") from e

        if not updated:
            raise BookNotFound(book_id)

        logger.info(f"Updated book #{book_id}")
        return Book.from_draft(book_id, draft)

    def delete_book(self, book_id: int) -> None:
        """
        Remove a record.

        Raises:
            BookNotFound: If no record has this ID
            PersistenceFailure: If the store rejects the delete
        """
        try:
            deleted = self._catalog_repo.delete(book_id)
        except (ValueError, RuntimeError) as e:
            logger.error(f"Delete failed for book #{book_id}: {e}")
            raise PersistenceFailure(f"Failed to delete book: {e}") from e

        if not deleted:
            raise BookNotFound(book_id)

        logger.info(f"Deleted book #{book_id}")

    def _check(self, draft: BookDraft) -> None:
        result = self._validator(draft)
        if not result.ok:
            logger.info(f"Rejected book draft: {result.error}")
            raise ValidationFailure(result.error)
