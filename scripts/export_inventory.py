#!/usr/bin/env python3
"""
Inventory Export Script.

Writes the books matching a query and facet selection to a JSON or CSV
file, using the same rules as the interactive view: a query of three or
more characters is a prefix search that ignores facets, otherwise the
genre and author selections narrow the full listing.

Usage:
    python -m scripts.export_inventory --format csv --output books.csv
    python -m scripts.export_inventory -f json -o fiction.json --genre Fiction
    python -m scripts.export_inventory -o books.json --api-url http://localhost:8000/api/v1
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from app.domain.ports import BookCatalogRepository
from app.domain.search_state import SearchState
from app.domain.services import SearchCoordinator
from app.infrastructure.db.sqlite_book_catalog_repository import SqliteBookCatalogRepository
from app.infrastructure.export.book_exporter import SUPPORTED_FORMATS, export_books
from app.infrastructure.external.inventory_api_client import InventoryApiClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/inventory.db")


def build_catalog(db_path: str, api_url: Optional[str] = None) -> BookCatalogRepository:
    """Read from a running inventory API when a URL is given, else from SQLite."""
    if api_url:
        return InventoryApiClient(api_url)
    return SqliteBookCatalogRepository(Path(db_path))


def main(
    fmt: str,
    output: str,
    db_path: str = str(DEFAULT_DB_PATH),
    query: str = "",
    genres: Optional[List[str]] = None,
    authors: Optional[List[str]] = None,
    api_url: Optional[str] = None,
) -> int:
    """
    Main entry point for the export script.

    Returns:
        Process exit code
    """
    state = SearchState(query_text=query)
    for genre in genres or []:
        state.add_genre(genre)
    for author in authors or []:
        state.add_author(author)

    coordinator = SearchCoordinator(
        catalog=build_catalog(db_path, api_url),
        display=lambda books: logger.info(f"{len(books)} books selected"),
        state=state,
    )
    coordinator.start()
    if coordinator.last_error is not None:
        logger.error(f"Export failed: {coordinator.last_error}")
        return 1

    payload = coordinator.export(fmt, export_books)
    Path(output).write_bytes(payload)
    logger.info(f"Wrote {output} ({coordinator.mode.value})")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export inventory books to JSON or CSV")
    parser.add_argument(
        "--format", "-f",
        choices=SUPPORTED_FORMATS,
        default="json",
        help="Output format (default: json)"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        required=True,
        help="File to write"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        default=str(DEFAULT_DB_PATH),
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})"
    )
    parser.add_argument(
        "--query", "-q",
        type=str,
        default="",
        help="Search text (3+ characters triggers a prefix search)"
    )
    parser.add_argument(
        "--genre",
        action="append",
        default=[],
        help="Genre to keep (repeatable)"
    )
    parser.add_argument(
        "--author",
        action="append",
        default=[],
        help="Author to keep (repeatable)"
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Inventory API root, e.g. http://localhost:8000/api/v1 (overrides --db-path)"
    )

    args = parser.parse_args()
    sys.exit(main(
        args.format, args.output, args.db_path, args.query, args.genre, args.author, args.api_url
    ))
