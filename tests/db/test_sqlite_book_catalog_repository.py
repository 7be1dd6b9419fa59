"""
Tests for SqliteBookCatalogRepository.

Validates the SQLite implementation of the BookCatalogRepository protocol,
including CRUD operations, prefix search, facet option queries and
constraint handling.

Test Pattern: AAA (Arrange-Act-Assert)
- Arrange: Set up test data and preconditions
- Act: Execute the operation being tested
- Assert: Verify the expected outcomes
"""
import sqlite3
from datetime import date

import pytest

from app.domain.value_objects import BookDraft
from app.infrastructure.db.sqlite_book_catalog_repository import SqliteBookCatalogRepository


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def repo(tmp_path):
    """
    Create a repository with a temporary database for each test.

    Uses pytest's tmp_path fixture to ensure isolation between tests.
    """
    return SqliteBookCatalogRepository(tmp_path / "test_inventory.db")


def _draft(title="Dune", author="Frank Herbert", genre="Science Fiction", stock="3"):
    return BookDraft(
        title=title,
        author=author,
        genre=genre,
        publication_date="1965-08-01",
        isbn="9780441013593",
        stock=stock,
    )


@pytest.fixture
def stocked_repo(repo):
    """Repository holding four books by three authors in two genres."""
    repo.insert(_draft("Dune", "Frank Herbert", "Science Fiction"))
    repo.insert(_draft("Emma", "Jane Austen", "Romance"))
    repo.insert(_draft("Children of Dune", "Frank Herbert", "Science Fiction"))
    repo.insert(_draft("Persuasion", "Jane Austen", "Romance"))
    return repo


# ============================================================================
# INITIALIZATION TESTS
# ============================================================================

class TestRepositoryInitialization:
    """Tests for repository initialization and schema creation."""

    def test_creates_table_on_init(self, repo):
        """A new repository is empty but usable."""
        assert repo.count() == 0
        assert repo.list_all() == []

    def test_creates_missing_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "inventory.db"

        SqliteBookCatalogRepository(db_path)

        assert db_path.exists()

    def test_reopening_keeps_data(self, tmp_path):
        db_path = tmp_path / "inventory.db"
        SqliteBookCatalogRepository(db_path).insert(_draft())

        reopened = SqliteBookCatalogRepository(db_path)

        assert reopened.count() == 1


# ============================================================================
# WRITE TESTS
# ============================================================================

class TestInsert:
    """Tests for insert()."""

    def test_assigns_increasing_ids(self, repo):
        first = repo.insert(_draft())
        second = repo.insert(_draft(title="Emma"))

        assert second.id > first.id

    def test_round_trips_every_field(self, repo):
        # Act
        saved = repo.insert(_draft(stock="12"))
        loaded = repo.get_by_id(saved.id)

        # Assert
        assert loaded is not None
        assert loaded.has_same_fields(saved)
        assert loaded.publication_date == date(1965, 8, 1)
        assert loaded.stock == 12

    def test_ids_are_not_reused_after_delete(self, repo):
        first = repo.insert(_draft())
        repo.delete(first.id)

        second = repo.insert(_draft())

        assert second.id != first.id


class TestUpdate:
    """Tests for update()."""

    def test_replaces_fields(self, stocked_repo):
        updated = stocked_repo.update(2, _draft("Sense and Sensibility", "Jane Austen", "Romance", "0"))

        assert updated is True
        book = stocked_repo.get_by_id(2)
        assert book.title == "Sense and Sensibility"
        assert book.stock == 0

    def test_missing_id_returns_false(self, repo):
        assert repo.update(99, _draft()) is False


class TestDelete:
    """Tests for delete()."""

    def test_removes_book(self, stocked_repo):
        assert stocked_repo.delete(1) is True

        assert stocked_repo.get_by_id(1) is None
        assert stocked_repo.count() == 3

    def test_missing_id_returns_false(self, repo):
        assert repo.delete(1) is False


# ============================================================================
# READ TESTS
# ============================================================================

class TestListAll:
    def test_returns_books_in_insertion_order(self, stocked_repo):
        titles = [b.title for b in stocked_repo.list_all()]

        assert titles == ["Dune", "Emma", "Children of Dune", "Persuasion"]


class TestSearchByPrefix:
    """Tests for search_by_prefix()."""

    def test_matches_title_prefix(self, stocked_repo):
        result = stocked_repo.search_by_prefix("dun")

        assert [b.title for b in result] == ["Dune"]

    def test_matches_author_prefix(self, stocked_repo):
        result = stocked_repo.search_by_prefix("jane")

        assert [b.title for b in result] == ["Emma", "Persuasion"]

    def test_matches_genre_prefix(self, stocked_repo):
        result = stocked_repo.search_by_prefix("SCIENCE")

        assert [b.id for b in result] == [1, 3]

    def test_does_not_match_inside_a_field(self, stocked_repo):
        """'une' appears in 'Dune' but is not a prefix of any field."""
        assert stocked_repo.search_by_prefix("une") == []

    def test_like_wildcards_match_literally(self, stocked_repo):
        assert stocked_repo.search_by_prefix("%") == []
        assert stocked_repo.search_by_prefix("_un") == []

    def test_empty_term_raises(self, repo):
        with pytest.raises(ValueError, match="cannot be empty"):
            repo.search_by_prefix("")


class TestFacetOptions:
    def test_distinct_authors_sorted(self, stocked_repo):
        assert stocked_repo.distinct_authors() == ["Frank Herbert", "Jane Austen"]

    def test_distinct_genres_sorted(self, stocked_repo):
        assert stocked_repo.distinct_genres() == ["Romance", "Science Fiction"]


# ============================================================================
# ERROR HANDLING TESTS
# ============================================================================

class TestErrorHandling:
    """Storage failures surface as ValueError / RuntimeError."""

    def test_negative_stock_violates_constraint(self, repo):
        with pytest.raises(ValueError, match="constraints"):
            repo.insert(_draft(stock=-1))

    def test_stock_beyond_integer_range_on_insert(self, repo):
        """SQLite INTEGER is 64-bit; larger values are rejected as constraint errors."""
        with pytest.raises(ValueError, match="constraints"):
            repo.insert(_draft(stock=str(10 ** 20)))

        assert repo.count() == 0

    def test_stock_beyond_integer_range_on_update(self, stocked_repo):
        with pytest.raises(ValueError, match="constraints"):
            stocked_repo.update(1, _draft(stock=str(10 ** 20)))

        assert stocked_repo.get_by_id(1).stock == 3

    def test_read_failure_becomes_runtime_error(self, tmp_path):
        repo = SqliteBookCatalogRepository(tmp_path / "inventory.db")
        with sqlite3.connect(str(tmp_path / "inventory.db")) as conn:
            conn.execute("DROP TABLE inventory")
        conn.close()

        with pytest.raises(RuntimeError, match="Database error"):
            repo.list_all()
