#!/usr/bin/env python3
"""
Inventory Seeding Script.

This script loads book records from a JSON file (an array of objects with
title, author, genre, publication_date, isbn and stock) into the SQLite
inventory. Each record goes through the same validation as the API;
rejected records are reported and skipped.

Usage:
    python -m scripts.seed_inventory --input data/sample_books.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Tuple

from app.domain.errors import PersistenceFailure, ValidationFailure
from app.domain.services import InventoryService
from app.domain.value_objects import BookDraft
from app.infrastructure.db.sqlite_book_catalog_repository import SqliteBookCatalogRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/inventory.db")


def seed(input_path: Path, db_path: Path = DEFAULT_DB_PATH) -> Tuple[int, int]:
    """
    Insert every valid record of a JSON file.

    Args:
        input_path: JSON file holding an array of book objects
        db_path: SQLite database to fill

    Returns:
        (inserted, rejected) counts
    """
    with input_path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"{input_path} must contain a JSON array of books")

    service = InventoryService(SqliteBookCatalogRepository(db_path))
    inserted = 0
    rejected = 0

    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            logger.warning(f"Record {index}: not an object, skipped")
            rejected += 1
            continue
        try:
            service.add_book(BookDraft.from_mapping(entry))
            inserted += 1
        except ValidationFailure as e:
            logger.warning(f"Record {index} rejected: {e.reason}")
            rejected += 1
        except PersistenceFailure as e:
            logger.warning(f"Record {index} not stored: {e}")
            rejected += 1

    return inserted, rejected


def main(input_path: str, db_path: str) -> int:
    """
    Main entry point for the seeding script.

    Returns:
        Process exit code
    """
    logger.info(f"Seeding {db_path} from {input_path}")
    try:
        inserted, rejected = seed(Path(input_path), Path(db_path))
    except (OSError, ValueError) as e:
        logger.error(f"Seeding failed: {e}")
        return 1

    logger.info(f"Done: {inserted} inserted, {rejected} rejected")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Load books from a JSON file into the inventory")
    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="JSON file with an array of books"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        default=str(DEFAULT_DB_PATH),
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})"
    )

    args = parser.parse_args()
    sys.exit(main(args.input, args.db_path))
