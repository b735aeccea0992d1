# ABOUTME: Integration tests for database lifecycle: create, save, reopen, query.
# ABOUTME: Validates that committed data persists across connection open/close cycles.

from pathlib import Path

from bookshelf.db.books import BookStore
from bookshelf.db.categories import CategoryStore
from bookshelf.db.connection import open_library
from bookshelf.db.errors import ConflictError
from bookshelf.db.types import Book, Category


class TestDatabaseLifecycle:
    """Integration tests for full DB lifecycle."""

    def test_save_reopen_query(self, tmp_path: Path) -> None:
        """Save through the stores, close, reopen, verify rows persist."""
        db_path = tmp_path / "lifecycle.db"

        conn = open_library(db_path)
        category = CategoryStore(conn).save(Category(name="Classics", description="Old books"))
        BookStore(conn).save(
            Book(
                title="The Name of the Rose",
                author="Umberto Eco",
                isbn="9780156001311",
                release_year=1980,
                category=category,
            )
        )
        conn.close()

        conn2 = open_library(db_path)
        found = BookStore(conn2).find_all()
        conn2.close()

        assert [b.title for b in found] == ["The Name of the Rose"]
        assert found[0].category is not None
        assert found[0].category.name == "Classics"

    def test_rolled_back_work_is_not_persisted(self, tmp_path: Path) -> None:
        """A failed removal leaves nothing half-done after reopening."""
        db_path = tmp_path / "rollback.db"

        conn = open_library(db_path)
        category = CategoryStore(conn).save(Category(name="Classics", description="Old books"))
        BookStore(conn).save(
            Book(
                title="Dune",
                author="Frank Herbert",
                isbn="9780441013593",
                release_year=1990,
                category=category,
            )
        )
        try:
            CategoryStore(conn).remove(category.id)  # type: ignore[arg-type]
        except ConflictError:
            pass
        conn.close()

        conn2 = open_library(db_path)
        assert CategoryStore(conn2).find_by_id(category.id) is not None  # type: ignore[arg-type]
        assert len(BookStore(conn2).find_all()) == 1
        conn2.close()

    def test_second_connection_sees_commits(self, tmp_path: Path) -> None:
        """Commits made through one connection are visible through another."""
        db_path = tmp_path / "shared.db"
        writer = open_library(db_path)
        reader = open_library(db_path)

        CategoryStore(writer).save(Category(name="Poetry", description="Verse"))

        assert [c.name for c in CategoryStore(reader).find_all()] == ["Poetry"]
        writer.close()
        reader.close()
