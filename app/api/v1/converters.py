"""
Converters between domain entities/value objects and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from dataclasses import asdict

from app.domain import entities as domain
from app.domain import value_objects as domain_vo
from app.api.v1 import schemas as api


def domain_book_to_api(book: domain.Book) -> api.Book:
    """
    Convert a domain Book entity to an API Book model.

    Args:
        book: Domain Book entity

    Returns:
        API Book model
    """
    return api.Book(**asdict(book))


def api_book_to_draft(payload: api.BookIn) -> domain_vo.BookDraft:
    """
    Convert an API request body to a domain BookDraft.

    Args:
        payload: API BookIn model

    Returns:
        Domain BookDraft value object (unvalidated)
    """
    return domain_vo.BookDraft(
        title=payload.title,
        author=payload.author,
        genre=payload.genre,
        publication_date=payload.publication_date,
        isbn=payload.isbn,
        stock=payload.stock,
    )
