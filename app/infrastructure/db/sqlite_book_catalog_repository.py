"""
SQLite implementation of the BookCatalogRepository port.

This adapter persists Book entities to a SQLite database, handling
serialization/deserialization and assigning record identifiers.
"""

import logging
import sqlite3
from datetime import date
from pathlib import Path
from typing import List, Optional

from app.domain.entities import Book
from app.domain.ports import BookCatalogRepository
from app.domain.value_objects import BookDraft

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


class SqliteBookCatalogRepository(BookCatalogRepository):
    """
    Identifiers come from SQLite (INTEGER PRIMARY KEY AUTOINCREMENT) and are
    never reused after a delete. Listing and search return rows in ID order,
    which is insertion order.
    """

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the repository with a database path
        """
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row # Needed to access by name column and not a number
        return conn

    def _init_schema(self) -> None:
        """Create the inventory table if it doesn't exist."""
        with self._get_connection() as conn:
            conn.execute("""
            CREATE TABLE IF NOT EXISTS inventory (
                entry_id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                author TEXT NOT NULL,
                genre TEXT NOT NULL,
                publication_date TEXT NOT NULL,
                isbn TEXT NOT NULL,
                stock INTEGER NOT NULL CHECK (stock >= 0)
            )
        """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_inventory_author ON inventory(author)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_inventory_genre ON inventory(genre)"
            )
        conn.close()

    def _draft_to_row(self, draft: BookDraft) -> dict:
        """Convert a BookDraft to a database row dict."""
        return {
            "title": draft.title,
            "author": draft.author,
            "genre": draft.genre,
            "publication_date": draft.parsed_publication_date().isoformat(),
            "isbn": draft.isbn,
            "stock": int(draft.stock),
        }

    def _row_to_book(self, row: sqlite3.Row) -> Book:
        """Convert a database row to a Book entity."""
        return Book(
            id=row["entry_id"],
            title=row["title"],
            author=row["author"],
            genre=row["genre"],
            publication_date=date.fromisoformat(row["publication_date"]),
            isbn=row["isbn"],
            stock=row["stock"],
        )

    def _query_books(self, sql: str, params=()) -> List[Book]:
        try:
            with self._get_connection() as conn:
                rows = conn.execute(sql, params).fetchall()
            conn.close()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while reading books: {e}") from e
        return [self._row_to_book(row) for row in rows]

    def _query_column(self, sql: str) -> List[str]:
        try:
            with self._get_connection() as conn:
                rows = conn.execute(sql).fetchall()
            conn.close()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while reading books: {e}") from e
        return [row[0] for row in rows]

    def count(self) -> int:
        """Get the total number of books in the inventory."""
        with self._get_connection() as conn:
            result = conn.execute("SELECT COUNT(*) as cnt FROM inventory").fetchone()
        conn.close()
        return result["cnt"]

    def list_all(self) -> List[Book]:
        """Retrieve all books from the inventory."""
        return self._query_books("SELECT * FROM inventory ORDER BY entry_id")

    def search_by_prefix(self, term: str) -> List[Book]:
        """Case-insensitive prefix match on title, author or genre."""
        if not term:
            raise ValueError("search term cannot be empty")

        pattern = _escape_like(term) + "%"
        logger.debug(f"Prefix search for {term!r}")
        return self._query_books(
            """
            SELECT * FROM inventory
            WHERE title LIKE :pattern ESCAPE '\\'
               OR author LIKE :pattern ESCAPE '\\'
               OR genre LIKE :pattern ESCAPE '\\'
            ORDER BY entry_id
            """,
            {"pattern": pattern},
        )

    def distinct_authors(self) -> List[str]:
        """Each author once, sorted."""
        return self._query_column("SELECT DISTINCT author FROM inventory ORDER BY author")

    def distinct_genres(self) -> List[str]:
        """Each genre once, sorted."""
        return self._query_column("SELECT DISTINCT genre FROM inventory ORDER BY genre")

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """Retrieve a book by its identifier."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM inventory WHERE entry_id = ?",
                (book_id,)
            ).fetchone()
        conn.close()

        if row is None:
            return None

        return self._row_to_book(row)

    def insert(self, draft: BookDraft) -> Book:
        """Insert a new book and return it with its assigned ID."""
        row = self._draft_to_row(draft)

        try:
            with self._get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO inventory
                    (title, author, genre, publication_date, isbn, stock)
                    VALUES
                    (:title, :author, :genre, :publication_date, :isbn, :stock)
                """, row)
                new_id = cursor.lastrowid
            conn.close()

        except (sqlite3.IntegrityError, OverflowError) as e:
            raise ValueError(f"Book violates inventory constraints: {e}") from e
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving book: {e}") from e

        return Book.from_draft(new_id, draft)

    def update(self, book_id: int, draft: BookDraft) -> bool:
        """Replace all fields of a book. Returns True if it existed."""
        row = self._draft_to_row(draft)
        row["entry_id"] = book_id

        try:
            with self._get_connection() as conn:
                cursor = conn.execute("""
                    UPDATE inventory
                    SET title = :title, author = :author, genre = :genre,
                        publication_date = :publication_date, isbn = :isbn, stock = :stock
                    WHERE entry_id = :entry_id
                """, row)
                updated = cursor.rowcount > 0
            conn.close()

        except (sqlite3.IntegrityError, OverflowError) as e:
            raise ValueError(f"Book violates inventory constraints: {e}") from e
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while updating book: {e}") from e

        return updated

    def delete(self, book_id: int) -> bool:
        """Delete a book from the inventory. Returns True if deleted."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "DELETE FROM inventory WHERE entry_id = ?",
                    (book_id,)
                )
                deleted = cursor.rowcount > 0
            conn.close()

        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while deleting book: {e}") from e

        return deleted
