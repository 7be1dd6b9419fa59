"""
API endpoints for the book inventory.

This module defines the FastAPI routes for listing, searching, creating,
editing, deleting and exporting books. It handles HTTP concerns and
delegates to the domain layer.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.domain.errors import BookNotFound, PersistenceFailure, ValidationFailure
from app.domain.ports import BookCatalogRepository
from app.domain.search_state import SearchState
from app.domain.services import InventoryService, SearchCoordinator
from app.api.v1 import schemas as api
from app.api.v1.converters import api_book_to_draft, domain_book_to_api
from app.api.v1.dependencies import get_catalog_repository, get_inventory_service
from app.infrastructure.export.book_exporter import (
    MEDIA_TYPES,
    SUPPORTED_FORMATS,
    export_books,
    export_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter()

GENERIC_FAILURE = "Something went wrong"


@router.get("/books", response_model=List[api.Book])
def list_books(
    catalog_repo: BookCatalogRepository = Depends(get_catalog_repository),
) -> List[api.Book]:
    """Return every book in the inventory."""
    try:
        books = catalog_repo.list_all()
    except RuntimeError as e:
        logger.error(f"Listing books failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=GENERIC_FAILURE,
        )
    return [domain_book_to_api(b) for b in books]


@router.get("/books/search", response_model=List[api.Book])
def search_books(
    q: str = Query(min_length=1, description="Prefix of a title, author or genre"),
    catalog_repo: BookCatalogRepository = Depends(get_catalog_repository),
) -> List[api.Book]:
    """
    Case-insensitive prefix search over title, author and genre.

    Deciding whether a query is long enough to search is the client's job;
    any non-empty prefix is served here.
    """
    try:
        books = catalog_repo.search_by_prefix(q)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except RuntimeError as e:
        logger.error(f"Search for {q!r} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=GENERIC_FAILURE,
        )
    return [domain_book_to_api(b) for b in books]


@router.get("/books/export")
def export_view(
    format: str = Query(default="json", description="json or csv"),
    q: str = Query(default="", description="Search box content"),
    genre: List[str] = Query(default=[], description="Selected genres"),
    author: List[str] = Query(default=[], description="Selected authors"),
    catalog_repo: BookCatalogRepository = Depends(get_catalog_repository),
) -> Response:
    """
    Download the books a client with this query and these facets would see.

    The same rules as the interactive view apply: a query of three or more
    characters searches the catalog and ignores facets, otherwise facets
    narrow the full listing.
    """
    fmt = format.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"format must be one of {SUPPORTED_FORMATS}",
        )

    state = SearchState(query_text=q)
    for value in genre:
        state.add_genre(value)
    for value in author:
        state.add_author(value)

    coordinator = SearchCoordinator(
        catalog=catalog_repo,
        display=lambda books: None,
        state=state,
    )
    coordinator.start()
    if coordinator.last_error is not None:
        logger.error(f"Export fetch failed: {coordinator.last_error}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=GENERIC_FAILURE,
        )

    payload = coordinator.export(fmt, export_books)
    return Response(
        content=payload,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename={export_filename(fmt)}"},
    )


@router.get("/books/{book_id}", response_model=api.Book)
def get_book_by_id(
    book_id: int,
    service: InventoryService = Depends(get_inventory_service),
) -> api.Book:
    """
    Get a book by its identifier.

    Raises:
        404: Book not found
    """
    book = service.get_book(book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id '{book_id}' not found",
        )

    return domain_book_to_api(book)


@router.post("/books", response_model=api.Book, status_code=status.HTTP_201_CREATED)
def add_book(
    payload: api.BookIn,
    service: InventoryService = Depends(get_inventory_service),
) -> api.Book:
    """
    Add a new book.

    Returns 400 with the validator's reason when a field is rejected.
    """
    try:
        book = service.add_book(api_book_to_draft(payload))
    except ValidationFailure as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.reason)
    except PersistenceFailure:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_FAILURE,
        )
    return domain_book_to_api(book)


@router.put("/books/{book_id}", response_model=api.Book)
def edit_book(
    book_id: int,
    payload: api.BookIn,
    service: InventoryService = Depends(get_inventory_service),
) -> api.Book:
    """Replace every field of a book except its identifier."""
    try:
        book = service.update_book(book_id, api_book_to_draft(payload))
    except ValidationFailure as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.reason)
    except BookNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceFailure:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_FAILURE,
        )
    return domain_book_to_api(book)


@router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(
    book_id: int,
    service: InventoryService = Depends(get_inventory_service),
) -> Response:
    """Delete a book."""
    try:
        service.delete_book(book_id)
    except BookNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceFailure:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_FAILURE,
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/authors", response_model=List[str])
def list_authors(
    catalog_repo: BookCatalogRepository = Depends(get_catalog_repository),
) -> List[str]:
    """Distinct author names, for the author filter typeahead."""
    try:
        return catalog_repo.distinct_authors()
    except RuntimeError as e:
        logger.error(f"Listing authors failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=GENERIC_FAILURE,
        )


@router.get("/genres", response_model=List[str])
def list_genres(
    catalog_repo: BookCatalogRepository = Depends(get_catalog_repository),
) -> List[str]:
    """Distinct genres, for the genre filter dropdown."""
    try:
        return catalog_repo.distinct_genres()
    except RuntimeError as e:
        logger.error(f"Listing genres failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=GENERIC_FAILURE,
        )


@router.get("/health", response_model=api.HealthResponse)
def health_check(
    catalog_repo: BookCatalogRepository = Depends(get_catalog_repository),
) -> api.HealthResponse:
    """Check that the inventory store is reachable."""
    return api.HealthResponse(status="ok", books=catalog_repo.count())
