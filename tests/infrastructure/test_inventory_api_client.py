"""
Tests for InventoryApiClient adapter.

Uses FakeSession and FakeResponse to test without network calls.
Covers: URL building, payload parsing, 404 handling, error mapping.
"""

import json as jsonlib
from typing import Any, Dict, List, Optional

import pytest
import requests

from app.domain.value_objects import BookDraft
from app.infrastructure.external.inventory_api_client import InventoryApiClient


# =============================================================================
# Fake HTTP Session and Response for testing
# =============================================================================


class FakeResponse:
    """Fake HTTP response for testing."""

    def __init__(self, json_data: Any = None, status_code: int = 200, raw: Optional[bytes] = None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        elif json_data is None:
            self.content = b""
        else:
            self.content = jsonlib.dumps(json_data).encode("utf-8")

    def json(self) -> Any:
        return jsonlib.loads(self.content)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    """Fake HTTP session recording every request."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self._response = response or FakeResponse([])
        self._error = error
        self.requests: List[Dict[str, Any]] = []

    def request(self, method, url, params=None, json=None, timeout=None) -> FakeResponse:
        self.requests.append(
            {"method": method, "url": url, "params": params, "json": json, "timeout": timeout}
        )
        if self._error is not None:
            raise self._error
        return self._response


def _book_json(book_id: int = 1, title: str = "Dune") -> Dict[str, Any]:
    return {
        "id": book_id,
        "title": title,
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "publication_date": "1965-08-01",
        "isbn": "9780441013593",
        "stock": 3,
    }


def _client(session: FakeSession) -> InventoryApiClient:
    return InventoryApiClient("http://inventory.test/api/v1/", session=session, timeout=2.0)


# =============================================================================
# Tests: Reads
# =============================================================================


class TestReads:
    def test_list_all_parses_books(self):
        session = FakeSession(FakeResponse([_book_json(1), _book_json(2, "Emma")]))

        books = _client(session).list_all()

        assert [b.id for b in books] == [1, 2]
        assert books[0].stock == 3
        assert session.requests[0]["url"] == "http://inventory.test/api/v1/books"
        assert session.requests[0]["timeout"] == 2.0

    def test_search_sends_query_param(self):
        session = FakeSession(FakeResponse([_book_json()]))

        _client(session).search_by_prefix("dun")

        assert session.requests[0]["url"].endswith("/books/search")
        assert session.requests[0]["params"] == {"q": "dun"}

    def test_search_empty_term_raises_without_request(self):
        session = FakeSession()

        with pytest.raises(ValueError, match="cannot be empty"):
            _client(session).search_by_prefix("")
        assert session.requests == []

    def test_distinct_authors(self):
        session = FakeSession(FakeResponse(["A", "B"]))

        assert _client(session).distinct_authors() == ["A", "B"]

    def test_get_by_id_not_found_returns_none(self):
        session = FakeSession(FakeResponse({"detail": "missing"}, status_code=404))

        assert _client(session).get_by_id(5) is None

    def test_count_reads_health(self):
        session = FakeSession(FakeResponse({"status": "ok", "books": 7}))

        assert _client(session).count() == 7
        assert session.requests[0]["url"].endswith("/health")


# =============================================================================
# Tests: Writes
# =============================================================================


class TestWrites:
    DRAFT = BookDraft("Dune", "Frank Herbert", "Science Fiction", "1965-08-01", "9780441013593", "3")

    def test_insert_posts_payload(self):
        session = FakeSession(FakeResponse(_book_json(9), status_code=201))

        book = _client(session).insert(self.DRAFT)

        assert book.id == 9
        sent = session.requests[0]
        assert sent["method"] == "POST"
        assert sent["json"]["publication_date"] == "1965-08-01"
        assert sent["json"]["stock"] == "3"

    def test_update_missing_returns_false(self):
        session = FakeSession(FakeResponse({"detail": "missing"}, status_code=404))

        assert _client(session).update(3, self.DRAFT) is False

    def test_delete_no_content_returns_true(self):
        session = FakeSession(FakeResponse(status_code=204))

        assert _client(session).delete(3) is True
        assert session.requests[0]["method"] == "DELETE"

    def test_rejected_write_keeps_server_reason(self):
        session = FakeSession(FakeResponse({"detail": "Invalid ISBN"}, status_code=400))

        with pytest.raises(ValueError, match="Invalid ISBN"):
            _client(session).insert(self.DRAFT)


# =============================================================================
# Tests: Failures
# =============================================================================


class TestFailures:
    def test_transport_error_becomes_runtime_error(self):
        session = FakeSession(error=requests.ConnectionError("refused"))

        with pytest.raises(RuntimeError, match="request failed"):
            _client(session).list_all()

    def test_server_error_becomes_runtime_error(self):
        session = FakeSession(FakeResponse({"detail": "boom"}, status_code=500))

        with pytest.raises(RuntimeError):
            _client(session).list_all()

    def test_404_without_allowance_is_runtime_error(self):
        session = FakeSession(FakeResponse({"detail": "missing"}, status_code=404))

        with pytest.raises(RuntimeError):
            _client(session).list_all()

    def test_invalid_json_becomes_runtime_error(self):
        session = FakeSession(FakeResponse(raw=b"<html>"))

        with pytest.raises(RuntimeError, match="invalid JSON"):
            _client(session).list_all()

    def test_malformed_book_becomes_runtime_error(self):
        session = FakeSession(FakeResponse([{"id": 1, "title": "No fields"}]))

        with pytest.raises(RuntimeError, match="malformed"):
            _client(session).list_all()

    def test_unprocessable_without_string_detail(self):
        session = FakeSession(FakeResponse({"detail": [{"msg": "bad"}]}, status_code=422))

        with pytest.raises(ValueError, match="HTTP 422"):
            _client(session).insert(TestWrites.DRAFT)
