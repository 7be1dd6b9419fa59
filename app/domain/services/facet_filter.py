"""
Client-side facet filtering and author suggestions.

Both operations are pure: they never touch the catalog and are cheap
enough to re-run on every state change.
"""

from typing import Collection, Iterable, List

from app.domain.entities import Book


class FacetFilterEngine:
    """
    Narrows a base set of books by genre and author selections.

    Several values within one facet combine with OR; the two facets
    combine with AND. An empty facet imposes no constraint.
    """

    def filter(
        self,
        records: Iterable[Book],
        genres: Collection[str],
        authors: Collection[str],
    ) -> List[Book]:
        """
        Keep the records matching the selected genres and authors.

        Args:
            records: Base set, in display order
            genres: Selected genre values (exact, case-sensitive)
            authors: Selected author values (exact, case-sensitive)

        Returns:
            The matching records, in their original relative order
        """
        genre_set = frozenset(genres)
        author_set = frozenset(authors)
        return [
            book for book in records
            if (not genre_set or book.genre in genre_set)
            and (not author_set or book.author in author_set)
        ]

    def suggest_authors(self, known_authors: Iterable[str], typed: str) -> List[str]:
        """
        Known author names containing the typed text, ignoring case.

        Args:
            known_authors: Distinct author names from the catalog
            typed: Current content of the author filter box

        Returns:
            Matching names in the order given, without repeats. Empty when
            nothing has been typed.
        """
        needle = (typed or "").strip().lower()
        if not needle:
            return []

        suggestions: List[str] = []
        seen = set()
        for author in known_authors:
            if author in seen:
                continue
            if needle in author.lower():
                suggestions.append(author)
                seen.add(author)
        return suggestions
