"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Union

MIN_QUERY_LENGTH = 3
"""Shortest query text that triggers a server-side search"""


class SearchMode(str, Enum):
    """
    Which source is authoritative for the base set.

    Exactly one mode applies at any instant; it is derived from the
    current SearchState and never stored separately.
    """

    UNFILTERED = "unfiltered"
    TEXT_SEARCH = "text_search"
    FACET_FILTERED = "facet_filtered"


@dataclass(frozen=True)
class BookDraft:
    """
    The fields of a book record without its identity.

    This is what gets submitted on create and edit. Values are kept
    as the user typed them (the date may be a string, the stock may be
    a numeric string) so that validation can judge the raw input.
    """

    title: str
    author: str
    genre: str
    publication_date: Union[str, date]
    isbn: str
    stock: Union[int, str]

    def parsed_publication_date(self) -> date:
        """Return the publication date as a ``date``."""
        if isinstance(self.publication_date, date):
            return self.publication_date
        return date.fromisoformat(str(self.publication_date))

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> "BookDraft":
        """
        Build a draft from a plain mapping (JSON payload, form data).

        ``publish_date`` is accepted as an alias of ``publication_date``.
        Missing fields become empty strings so validation reports them.
        """
        publication_date = data.get("publication_date", data.get("publish_date", ""))
        return BookDraft(
            title=str(data.get("title") or ""),
            author=str(data.get("author") or ""),
            genre=str(data.get("genre") or ""),
            publication_date=publication_date if publication_date is not None else "",
            isbn=str(data.get("isbn") or ""),
            stock=data.get("stock", ""),
        )


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a BookDraft.

    ``error`` is None when the draft is valid, otherwise it holds the
    human-readable reason of the first failed rule.
    """

    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True if no rule failed."""
        return self.error is None

    @staticmethod
    def success() -> "ValidationResult":
        return ValidationResult()

    @staticmethod
    def failure(reason: str) -> "ValidationResult":
        if not reason:
            raise ValueError("failure reason cannot be empty")
        return ValidationResult(error=reason)
