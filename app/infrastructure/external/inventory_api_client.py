"""
HTTP client for the inventory API implementing BookCatalogRepository.

This adapter lets the search coordinator (and any other domain service)
run against a remote inventory server exactly as it runs against the
local SQLite store. It translates JSON payloads into Book entities and
HTTP failures into the exceptions the port documents.

The constructor accepts an optional ``session`` so tests can inject a
fake that returns canned responses instead of hitting the network.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from app.domain.entities import Book
from app.domain.ports import BookCatalogRepository
from app.domain.value_objects import BookDraft

logger = logging.getLogger(__name__)


class InventoryApiClient(BookCatalogRepository):
    """
    Remote BookCatalogRepository backed by the inventory HTTP API.

    Usage:
        client = InventoryApiClient("http://localhost:8000/api/v1")
        books = client.search_by_prefix("dun")
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str,
        session: Optional[Any] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. "http://localhost:8000/api/v1"
            session: Optional HTTP session for dependency injection.
                    If None, creates a new requests.Session().
            timeout: Seconds to wait for each response
        """
        self._base_url = base_url.rstrip("/")
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    # =========================================================================
    # Read side
    # =========================================================================

    def list_all(self) -> List[Book]:
        data = self._request("GET", "/books")
        return [self._parse_book(item) for item in data]

    def search_by_prefix(self, term: str) -> List[Book]:
        if not term:
            raise ValueError("search term cannot be empty")
        data = self._request("GET", "/books/search", params={"q": term})
        return [self._parse_book(item) for item in data]

    def distinct_authors(self) -> List[str]:
        return [str(a) for a in self._request("GET", "/authors")]

    def distinct_genres(self) -> List[str]:
        return [str(g) for g in self._request("GET", "/genres")]

    def get_by_id(self, book_id: int) -> Optional[Book]:
        data = self._request("GET", f"/books/{book_id}", allow_not_found=True)
        if data is None:
            return None
        return self._parse_book(data)

    def count(self) -> int:
        data = self._request("GET", "/health")
        return int(data["books"])

    # =========================================================================
    # Write side
    # =========================================================================

    def insert(self, draft: BookDraft) -> Book:
        data = self._request("POST", "/books", json=self._draft_to_payload(draft))
        return self._parse_book(data)

    def update(self, book_id: int, draft: BookDraft) -> bool:
        data = self._request(
            "PUT",
            f"/books/{book_id}",
            json=self._draft_to_payload(draft),
            allow_not_found=True,
        )
        return data is not None

    def delete(self, book_id: int) -> bool:
        data = self._request("DELETE", f"/books/{book_id}", allow_not_found=True)
        return data is not None

    # =========================================================================
    # Private helper methods
    # =========================================================================

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Any:
        """
        Send a request and decode the JSON body.

        Returns None for a 404 when ``allow_not_found`` is set, and an empty
        dict for bodiless success responses (204).

        Raises:
            ValueError: On 400/422 (the server's detail is kept)
            RuntimeError: On transport errors and any other failure status
        """
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method, url, params=params, json=json, timeout=self._timeout
            )
        except requests.RequestException as e:
            raise RuntimeError(f"Inventory API request failed: {e}") from e

        if response.status_code == 404 and allow_not_found:
            return None

        if response.status_code in (400, 422):
            raise ValueError(self._error_detail(response))

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise RuntimeError(f"Inventory API request failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise RuntimeError(f"Inventory API returned invalid JSON: {e}") from e

    def _error_detail(self, response: Any) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("detail") if isinstance(body, dict) else None
        if isinstance(detail, str) and detail:
            return detail
        return f"Request rejected with HTTP {response.status_code}"

    def _draft_to_payload(self, draft: BookDraft) -> Dict[str, Any]:
        publication_date = draft.publication_date
        if isinstance(publication_date, date):
            publication_date = publication_date.isoformat()
        return {
            "title": draft.title,
            "author": draft.author,
            "genre": draft.genre,
            "publication_date": publication_date,
            "isbn": draft.isbn,
            "stock": draft.stock,
        }

    def _parse_book(self, item: Dict[str, Any]) -> Book:
        try:
            return Book(
                id=int(item["id"]),
                title=item["title"],
                author=item["author"],
                genre=item["genre"],
                publication_date=date.fromisoformat(item["publication_date"]),
                isbn=item["isbn"],
                stock=int(item["stock"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed book payload: {item!r}")
            raise RuntimeError(f"Inventory API returned a malformed book: {e}") from e
