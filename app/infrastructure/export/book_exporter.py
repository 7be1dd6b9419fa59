"""
JSON and CSV export of a set of books.

The caller decides which books to export (normally whatever is currently
displayed); this module only serializes them.
"""

import csv
import io
import json
from typing import Dict, List, Sequence

from app.domain.entities import Book

SUPPORTED_FORMATS = ("json", "csv")

CSV_HEADER = ["Entry ID", "Title", "Author", "Genre", "Publication Date", "ISBN", "Stock"]

MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
}


def book_to_dict(book: Book) -> Dict[str, object]:
    """Plain JSON-compatible representation of a book."""
    return {
        "entry_id": book.id,
        "title": book.title,
        "author": book.author,
        "genre": book.genre,
        "publication_date": book.publication_date.isoformat(),
        "isbn": book.isbn,
        "stock": book.stock,
    }


def export_books(books: Sequence[Book], fmt: str) -> bytes:
    """
    Serialize books to a downloadable payload.

    Args:
        books: Books to export, in output order
        fmt: "json" or "csv" (case-insensitive)

    Returns:
        UTF-8 encoded file content

    Raises:
        ValueError: If the format is not supported
    """
    fmt = (fmt or "").lower()
    if fmt == "json":
        return _to_json(books)
    if fmt == "csv":
        return _to_csv(books)
    raise ValueError(
        f"format must be one of {SUPPORTED_FORMATS}, got '{fmt}'"
    )


def export_filename(fmt: str) -> str:
    return f"books.{fmt.lower()}"


def _to_json(books: Sequence[Book]) -> bytes:
    rows: List[Dict[str, object]] = [book_to_dict(b) for b in books]
    return json.dumps(rows, indent=2, ensure_ascii=False).encode("utf-8")


def _to_csv(books: Sequence[Book]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for book in books:
        writer.writerow([
            book.id,
            book.title,
            book.author,
            book.genre,
            book.publication_date.isoformat(),
            book.isbn,
            book.stock,
        ])
    return buffer.getvalue().encode("utf-8")
