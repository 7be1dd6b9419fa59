"""
Session-scoped search and filter state.

One SearchState exists per interactive session. Every consumer receives
the same instance and all changes go through the mutators below, which
report whether anything actually changed so callers can skip redundant
re-evaluation.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .value_objects import MIN_QUERY_LENGTH, SearchMode


@dataclass
class SearchState:
    """
    Current query text, facet selections and author typeahead.

    Facet values are stored in insertion order without duplicates.
    Membership is a case-sensitive exact match on the stored value.
    """

    query_text: str = ""
    """Free-text search box content"""

    author_typeahead: str = ""
    """In-progress author filter input, not yet a selection"""

    _genres: Dict[str, None] = field(default_factory=dict, repr=False)
    _authors: Dict[str, None] = field(default_factory=dict, repr=False)

    @property
    def selected_genres(self) -> Tuple[str, ...]:
        return tuple(self._genres)

    @property
    def selected_authors(self) -> Tuple[str, ...]:
        return tuple(self._authors)

    def has_facets(self) -> bool:
        """True if at least one genre or author is selected."""
        return bool(self._genres or self._authors)

    def is_text_search(self) -> bool:
        """True if the query is long enough for a server-side search."""
        return len(self.query_text) >= MIN_QUERY_LENGTH

    def mode(self) -> SearchMode:
        """
        Derive the active mode from the current values.

        A long enough query wins over facet selections.
        """
        if self.is_text_search():
            return SearchMode.TEXT_SEARCH
        if self.has_facets():
            return SearchMode.FACET_FILTERED
        return SearchMode.UNFILTERED

    def set_query(self, text: str) -> bool:
        text = text or ""
        if text == self.query_text:
            return False
        self.query_text = text
        return True

    def add_genre(self, genre: str) -> bool:
        return _add(self._genres, genre)

    def remove_genre(self, genre: str) -> bool:
        return _remove(self._genres, genre)

    def add_author(self, author: str) -> bool:
        return _add(self._authors, author)

    def remove_author(self, author: str) -> bool:
        return _remove(self._authors, author)

    def set_author_typeahead(self, text: str) -> bool:
        text = text or ""
        if text == self.author_typeahead:
            return False
        self.author_typeahead = text
        return True

    def clear_filters(self) -> bool:
        """
        Drop every facet selection and the author typeahead.

        The query text is left untouched.
        """
        changed = self.has_facets() or bool(self.author_typeahead)
        self._genres.clear()
        self._authors.clear()
        self.author_typeahead = ""
        return changed


def _add(values: Dict[str, None], value: str) -> bool:
    # Empty selections come from the "all" option of a dropdown.
    if not value or value in values:
        return False
    values[value] = None
    return True


def _remove(values: Dict[str, None], value: str) -> bool:
    if value not in values:
        return False
    del values[value]
    return True
