# ABOUTME: Unit tests for database schema creation and connection management.
# ABOUTME: Validates table structure, constraints, WAL mode, foreign keys, and default paths.

import sqlite3
from pathlib import Path

import pytest

from bookshelf.db.connection import DEFAULT_DB_PATH, open_library


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "test_library.db"


def _columns(conn: sqlite3.Connection, table: str) -> set[str]:
    return {row[1] for row in conn.execute(f"PRAGMA table_info({table})").fetchall()}


class TestOpenLibrary:
    """Tests for open_library() connection factory."""

    def test_creates_database_file(self, db_path: Path) -> None:
        """Calling open_library creates a .db file at the given path."""
        conn = open_library(db_path)
        conn.close()
        assert db_path.exists()

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """Creates parent directories if they don't exist."""
        nested = tmp_path / "deep" / "nested" / "library.db"
        conn = open_library(nested)
        conn.close()
        assert nested.exists()

    def test_creates_category_table(self, db_path: Path) -> None:
        """The category table exists with expected columns."""
        conn = open_library(db_path)
        columns = _columns(conn, "category")
        conn.close()
        assert columns == {"id", "name", "description"}

    def test_creates_book_table(self, db_path: Path) -> None:
        """The book table exists with expected columns."""
        conn = open_library(db_path)
        columns = _columns(conn, "book")
        conn.close()
        assert columns == {
            "id",
            "title",
            "author",
            "synopsis",
            "isbn",
            "release_year",
            "category_id",
        }

    def test_creates_indexes(self, db_path: Path) -> None:
        """Expected indexes exist."""
        conn = open_library(db_path)
        index_names = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")
        }
        conn.close()
        assert "idx_category_name" in index_names
        assert "idx_book_category_id" in index_names

    def test_default_path(self) -> None:
        """Default path resolves to ~/.bookshelf/library.db."""
        expected = Path.home() / ".bookshelf" / "library.db"
        assert expected == DEFAULT_DB_PATH

    def test_reopen_existing_database(self, db_path: Path) -> None:
        """Opening an existing DB does not recreate or destroy data."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO category (name, description) VALUES ('Fiction', 'Novels')")
        conn.commit()
        conn.close()

        conn2 = open_library(db_path)
        row = conn2.execute("SELECT name FROM category").fetchone()
        conn2.close()
        assert row is not None
        assert row[0] == "Fiction"

    def test_connection_is_wal_mode(self, db_path: Path) -> None:
        """WAL journal mode is enabled."""
        conn = open_library(db_path)
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"

    def test_foreign_keys_enabled(self, db_path: Path) -> None:
        """Foreign key enforcement is switched on for every connection."""
        conn = open_library(db_path)
        enabled = conn.execute("PRAGMA foreign_keys").fetchone()[0]
        conn.close()
        assert enabled == 1

    def test_connection_has_row_factory(self, db_path: Path) -> None:
        """Connection uses sqlite3.Row factory for dict-like access."""
        conn = open_library(db_path)
        assert conn.row_factory == sqlite3.Row
        conn.close()

    def test_casefold_function_registered(self, db_path: Path) -> None:
        """SQL casefold() folds non-ASCII letters and passes NULL through."""
        conn = open_library(db_path)
        folded, missing = conn.execute("SELECT casefold('FICÇÃO'), casefold(NULL)").fetchone()
        conn.close()
        assert folded == "ficção"
        assert missing is None


class TestConstraints:
    """Store-level constraints backing the application checks."""

    @pytest.fixture()
    def conn(self, db_path: Path) -> sqlite3.Connection:
        connection = open_library(db_path)
        connection.execute("INSERT INTO category (id, name, description) VALUES (1, 'Tech', 't')")
        connection.commit()
        return connection

    def test_isbn_unique(self, conn: sqlite3.Connection) -> None:
        """Two books cannot share an ISBN."""
        sql = (
            "INSERT INTO book (title, author, isbn, release_year, category_id) "
            "VALUES ('T', 'A', 'same', 2000, 1)"
        )
        conn.execute(sql)
        with pytest.raises(sqlite3.IntegrityError, match="UNIQUE"):
            conn.execute(sql)

    def test_category_name_unique_ignoring_case(self, conn: sqlite3.Connection) -> None:
        """Category names are unique regardless of case."""
        with pytest.raises(sqlite3.IntegrityError, match="UNIQUE"):
            conn.execute("INSERT INTO category (name, description) VALUES ('TECH', 'x')")

    def test_category_name_unique_ignoring_accented_case(
        self, conn: sqlite3.Connection
    ) -> None:
        """Uniqueness folds case beyond ASCII."""
        conn.execute("INSERT INTO category (name, description) VALUES ('Ficção', 'x')")
        with pytest.raises(sqlite3.IntegrityError, match="UNIQUE"):
            conn.execute("INSERT INTO category (name, description) VALUES ('FICÇÃO', 'y')")

    def test_release_year_check(self, conn: sqlite3.Connection) -> None:
        """Release years before 1967 are rejected by the table itself."""
        with pytest.raises(sqlite3.IntegrityError, match="CHECK"):
            conn.execute(
                "INSERT INTO book (title, author, isbn, release_year, category_id) "
                "VALUES ('T', 'A', 'i', 1950, 1)"
            )

    def test_category_reference_enforced(self, conn: sqlite3.Connection) -> None:
        """A book must reference an existing category."""
        with pytest.raises(sqlite3.IntegrityError, match="FOREIGN KEY"):
            conn.execute(
                "INSERT INTO book (title, author, isbn, release_year, category_id) "
                "VALUES ('T', 'A', 'i', 2000, 99)"
            )
