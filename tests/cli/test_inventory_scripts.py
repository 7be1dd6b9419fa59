"""
Tests for the seed and export command-line scripts.
"""

import json

import pytest
from fastapi.testclient import TestClient

from app.api.v1.dependencies import get_catalog_repository
from app.infrastructure.db.sqlite_book_catalog_repository import SqliteBookCatalogRepository
from app.infrastructure.external.inventory_api_client import InventoryApiClient
from app.main import app
from scripts import export_inventory, seed_inventory


RECORDS = [
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "publication_date": "1965-08-01",
        "isbn": "9780441013593",
        "stock": 3,
    },
    {
        "title": "Emma",
        "author": "Jane Austen",
        "genre": "Romance",
        "publish_date": "1815-12-23",
        "isbn": "9780141439587",
        "stock": "1",
    },
    {
        "title": "Broken ISBN",
        "author": "Nobody",
        "genre": "Romance",
        "publication_date": "2000-01-01",
        "isbn": "nope",
        "stock": 0,
    },
    "not a record",
]


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "inventory.db"


class TestSeed:
    def test_inserts_valid_records_and_counts_rejects(self, input_file, db_path):
        inserted, rejected = seed_inventory.seed(input_file, db_path)

        assert (inserted, rejected) == (2, 2)
        assert SqliteBookCatalogRepository(db_path).count() == 2

    def test_main_returns_error_for_non_array(self, tmp_path, db_path):
        path = tmp_path / "object.json"
        path.write_text('{"title": "Dune"}', encoding="utf-8")

        assert seed_inventory.main(str(path), str(db_path)) == 1

    def test_main_returns_error_for_missing_file(self, tmp_path, db_path):
        assert seed_inventory.main(str(tmp_path / "missing.json"), str(db_path)) == 1


class TestExport:
    def test_exports_facet_selection(self, input_file, db_path, tmp_path):
        seed_inventory.seed(input_file, db_path)
        output = tmp_path / "romance.json"

        code = export_inventory.main("json", str(output), str(db_path), genres=["Romance"])

        assert code == 0
        assert [b["title"] for b in json.loads(output.read_text(encoding="utf-8"))] == ["Emma"]

    def test_exports_search_result_as_csv(self, input_file, db_path, tmp_path):
        seed_inventory.seed(input_file, db_path)
        output = tmp_path / "dune.csv"

        export_inventory.main("csv", str(output), str(db_path), query="frank")

        lines = output.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert lines[1].startswith("1,Dune,")

    def test_build_catalog_prefers_api_url(self, db_path):
        catalog = export_inventory.build_catalog(str(db_path), "http://localhost:8000/api/v1")

        assert isinstance(catalog, InventoryApiClient)

    def test_build_catalog_defaults_to_sqlite(self, db_path):
        catalog = export_inventory.build_catalog(str(db_path))

        assert isinstance(catalog, SqliteBookCatalogRepository)

    def test_exports_through_running_api(self, input_file, db_path, tmp_path, monkeypatch):
        """The API client reads from the app served in-process."""
        seed_inventory.seed(input_file, db_path)
        repo = SqliteBookCatalogRepository(db_path)
        app.dependency_overrides[get_catalog_repository] = lambda: repo
        monkeypatch.setattr(
            export_inventory,
            "InventoryApiClient",
            lambda url: InventoryApiClient(url, session=TestClient(app)),
        )
        output = tmp_path / "herbert.json"

        try:
            code = export_inventory.main(
                "json", str(output), query="frank", api_url="http://testserver/api/v1"
            )
        finally:
            app.dependency_overrides.clear()

        assert code == 0
        assert [b["title"] for b in json.loads(output.read_text(encoding="utf-8"))] == ["Dune"]


class TestSeedFailures:
    def test_store_failure_skips_record_and_continues(self, tmp_path, db_path):
        records = [
            dict(RECORDS[0], stock=str(10 ** 20)),
            RECORDS[1],
        ]
        path = tmp_path / "overflow.json"
        path.write_text(json.dumps(records), encoding="utf-8")

        inserted, rejected = seed_inventory.seed(path, db_path)

        assert (inserted, rejected) == (1, 1)
        assert [b.title for b in SqliteBookCatalogRepository(db_path).list_all()] == ["Emma"]
