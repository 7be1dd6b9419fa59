"""
Search coordinator: decides where the displayed books come from.

The coordinator owns the session's SearchState and, on every change,
re-derives one of three modes:

    UNFILTERED      short query, no facets  -> full listing from the catalog
    TEXT_SEARCH     query of 3+ characters  -> server-side prefix search
    FACET_FILTERED  short query, facets set -> cached full listing, filtered locally

Evaluation is level-triggered. Each mode has a fetch key; re-evaluating
with the key that is already active does nothing, so repeated input that
does not change the outcome never causes a second request.

Every fetch carries a token from a monotonically increasing counter. Only
the completion holding the latest token is applied; anything older is a
stale response and is dropped, whatever order completions arrive in.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from app.domain.entities import Book
from app.domain.errors import FetchFailure
from app.domain.ports import BookCatalogRepository, BookExporter, FetchScheduler, ResultDisplay
from app.domain.search_state import SearchState
from app.domain.services.facet_filter import FacetFilterEngine
from app.domain.value_objects import SearchMode

logger = logging.getLogger(__name__)

T = TypeVar("T")
FetchKey = Tuple[SearchMode, str]

_UNFILTERED_KEY: FetchKey = (SearchMode.UNFILTERED, "")
_FACET_KEY: FetchKey = (SearchMode.FACET_FILTERED, "")


class ImmediateFetchScheduler:
    """Runs each fetch inline and reports the outcome before returning."""

    def submit(
        self,
        job: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        try:
            result = job()
        except Exception as e:
            on_failure(e)
            return
        on_success(result)


class SearchCoordinator:
    """
    Keeps the displayed result set consistent with the search state.

    UI callbacks (``on_query_change``, ``on_genre_select``...) mutate the
    state and trigger re-evaluation. Results are pushed to the display
    collaborator whenever the displayed set changes.

    Usage:
        coordinator = SearchCoordinator(catalog=repo, display=table.render)
        coordinator.start()
        coordinator.on_query_change("dune")
    """

    def __init__(
        self,
        catalog: BookCatalogRepository,
        display: ResultDisplay,
        scheduler: Optional[FetchScheduler] = None,
        engine: Optional[FacetFilterEngine] = None,
        state: Optional[SearchState] = None,
    ) -> None:
        """
        Initialize the coordinator with its collaborators.

        Args:
            catalog: Read side of the inventory (listing, search, facet values)
            display: Called with the new result set every time it changes
            scheduler: Runs fetches; defaults to running them inline
            engine: Facet filter implementation
            state: Shared session state; a fresh one is created if omitted
        """
        self._catalog = catalog
        self._display = display
        self._scheduler = scheduler if scheduler is not None else ImmediateFetchScheduler()
        self._engine = engine if engine is not None else FacetFilterEngine()
        self._state = state if state is not None else SearchState()

        self._token = 0
        self._inflight: Optional[FetchKey] = None
        self._active_key: Optional[FetchKey] = None

        self._unfiltered: Optional[List[Book]] = None
        self._base_set: List[Book] = []
        self._displayed: List[Book] = []
        self._last_error: Optional[Exception] = None
        self._options_error: Optional[Exception] = None

        self._known_authors: Optional[List[str]] = None
        self._known_genres: Optional[List[str]] = None
        self._suggestions: List[str] = []

    # =========================================================================
    # Read-only view
    # =========================================================================

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def mode(self) -> SearchMode:
        return self._state.mode()

    @property
    def displayed(self) -> List[Book]:
        return list(self._displayed)

    @property
    def base_set(self) -> List[Book]:
        return list(self._base_set)

    @property
    def loading(self) -> bool:
        return self._inflight is not None

    @property
    def suggestions(self) -> List[str]:
        return list(self._suggestions)

    @property
    def last_error(self) -> Optional[Exception]:
        """Failure of the latest listing or search fetch, if any."""
        return self._last_error

    @property
    def options_error(self) -> Optional[Exception]:
        """Failure of the latest author or genre option load, if any."""
        return self._options_error

    # =========================================================================
    # UI callbacks
    # =========================================================================

    def start(self) -> None:
        """Perform the initial load for the current state."""
        self._evaluate()

    def refresh(self) -> None:
        """Re-fetch the data behind the current mode, even if it is held."""
        self._evaluate(force=True)

    def on_query_change(self, text: str) -> None:
        if self._state.set_query(text):
            self._evaluate()

    def on_genre_select(self, genre: str) -> None:
        if self._state.add_genre(genre):
            self._evaluate()

    def on_genre_remove(self, genre: str) -> None:
        if self._state.remove_genre(genre):
            self._evaluate()

    def on_author_select(self, author: str) -> None:
        """Commit an author (usually a picked suggestion) and reset the typeahead."""
        added = self._state.add_author(author)
        self._state.set_author_typeahead("")
        self._suggestions = []
        if added:
            self._evaluate()

    def on_author_remove(self, author: str) -> None:
        if self._state.remove_author(author):
            self._evaluate()

    def on_author_typeahead(self, text: str) -> None:
        """Record the typed author text and recompute suggestions."""
        self._state.set_author_typeahead(text)
        if not self._state.author_typeahead:
            self._suggestions = []
            return
        self._suggestions = self._engine.suggest_authors(
            self.known_authors(), self._state.author_typeahead
        )

    def on_clear_filters(self) -> None:
        """Drop all facet selections; the query text is kept."""
        self._suggestions = []
        if self._state.clear_filters():
            self._evaluate()

    # =========================================================================
    # Facet option lists
    # =========================================================================

    def known_authors(self) -> List[str]:
        """Distinct authors of the catalog, loaded once on first use."""
        if self._known_authors is None:
            self._known_authors = self._load_options("authors", self._catalog.distinct_authors)
        return list(self._known_authors or [])

    def known_genres(self) -> List[str]:
        """Distinct genres of the catalog, loaded once on first use."""
        if self._known_genres is None:
            self._known_genres = self._load_options("genres", self._catalog.distinct_genres)
        return list(self._known_genres or [])

    def reload_facet_options(self) -> None:
        """Forget the cached author and genre lists (e.g. after a write)."""
        self._known_authors = None
        self._known_genres = None

    def _load_options(self, name: str, loader: Callable[[], List[str]]) -> Optional[List[str]]:
        try:
            options = list(loader())
        except Exception as e:
            logger.warning(f"Failed to load distinct {name}: {e}")
            failure = FetchFailure(f"Failed to load {name}: {e}")
            failure.__cause__ = e
            self._options_error = failure
            return None
        self._options_error = None
        return options

    # =========================================================================
    # Local reconciliation after writes
    # =========================================================================

    def apply_local_update(self, book: Book) -> None:
        """Replace a book (matched by ID) in every held set and redisplay."""
        def replace(books: List[Book]) -> List[Book]:
            return [book if b.id == book.id else b for b in books]

        self._patch(replace)

    def apply_local_delete(self, book_id: int) -> None:
        """Drop a book from every held set and redisplay."""
        def remove(books: List[Book]) -> List[Book]:
            return [b for b in books if b.id != book_id]

        self._patch(remove)

    def _patch(self, change: Callable[[List[Book]], List[Book]]) -> None:
        if self._unfiltered is not None:
            self._unfiltered = change(self._unfiltered)
        self._base_set = change(self._base_set)
        if self.mode is SearchMode.FACET_FILTERED and self._unfiltered is not None:
            self._render(self._facet_view())
        else:
            self._render(change(self._displayed))

    def export(self, fmt: str, exporter: BookExporter) -> bytes:
        """Serialize what is on screen, never the unfiltered base set."""
        return exporter(self.displayed, fmt)

    # =========================================================================
    # State machine
    # =========================================================================

    def _evaluate(self, force: bool = False) -> None:
        mode = self._state.mode()

        if mode is SearchMode.TEXT_SEARCH:
            term = self._state.query_text
            key: FetchKey = (mode, term)
            if force or key != self._active_key:
                self._fetch(key, lambda: self._catalog.search_by_prefix(term))
            return

        if mode is SearchMode.UNFILTERED:
            if force or _UNFILTERED_KEY != self._active_key:
                self._fetch(_UNFILTERED_KEY, self._catalog.list_all)
            return

        self._enter_facet_mode(force)

    def _enter_facet_mode(self, force: bool) -> None:
        listing_inflight = self._inflight in (_UNFILTERED_KEY, _FACET_KEY)

        if force or (self._unfiltered is None and not listing_inflight):
            self._fetch(_FACET_KEY, self._catalog.list_all)
            return

        if self._active_key != _FACET_KEY:
            logger.debug("Entering facet-filtered mode")
        self._active_key = _FACET_KEY

        if listing_inflight:
            # The pending listing renders with the current facets on arrival.
            return

        if self._inflight is not None:
            self._invalidate_inflight()
        self._base_set = list(self._unfiltered or [])
        self._render(self._facet_view())

    def _fetch(self, key: FetchKey, job: Callable[[], Sequence[Book]]) -> None:
        self._token += 1
        token = self._token
        self._inflight = key
        self._active_key = key
        logger.debug(f"Issuing fetch #{token} for {key[0].value} {key[1]!r}")

        self._scheduler.submit(
            job,
            lambda books: self._on_fetched(token, key, books),
            lambda exc: self._on_fetch_failed(token, key, exc),
        )

    def _invalidate_inflight(self) -> None:
        # Bumping the counter turns every outstanding completion stale.
        self._token += 1
        self._inflight = None

    def _on_fetched(self, token: int, key: FetchKey, books: Sequence[Book]) -> None:
        if token != self._token:
            logger.debug(f"Discarding stale response #{token} (latest is #{self._token})")
            return

        self._inflight = None
        self._last_error = None
        result = list(books)

        if key[0] is SearchMode.TEXT_SEARCH:
            self._base_set = result
            self._render(result)
            return

        self._unfiltered = result
        self._base_set = list(result)
        self._render(self._facet_view())

    def _on_fetch_failed(self, token: int, key: FetchKey, exc: Exception) -> None:
        if token != self._token:
            logger.debug(f"Ignoring failure of stale fetch #{token}: {exc}")
            return

        logger.warning(f"Fetch #{token} for {key[0].value} failed: {exc}")
        self._inflight = None
        # Forget the key so the next evaluation of the same input retries.
        self._active_key = None

        if isinstance(exc, FetchFailure):
            self._last_error = exc
        else:
            failure = FetchFailure(f"Fetch failed: {exc}")
            failure.__cause__ = exc
            self._last_error = failure

    def _facet_view(self) -> List[Book]:
        return self._engine.filter(
            self._unfiltered or [],
            self._state.selected_genres,
            self._state.selected_authors,
        )

    def _render(self, books: List[Book]) -> None:
        self._displayed = list(books)
        self._display(list(books))
