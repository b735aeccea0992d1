# ABOUTME: Persistence operations for book categories in the Bookshelf library.
# ABOUTME: Save, update, remove, lookups, and book-count aggregates over the category table.

import logging
import sqlite3
from contextlib import closing

from bookshelf.db.errors import ConflictError, IntegrityError, NotFoundError
from bookshelf.db.mapping import category_to_row, row_to_category
from bookshelf.db.transaction import TransactionGuard, reading
from bookshelf.db.types import Category
from bookshelf.db.validation import category_violations, is_blank, raise_first, require_id

logger = logging.getLogger(__name__)

_ENTITY = "category"

CATEGORY_HAS_BOOKS = "Cannot remove category that has associated books"


class CategoryStore:
    """Wraps a sqlite3 connection and provides typed CRUD for the category table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def save(self, category: Category) -> Category:
        """Insert a new category and assign its generated id.

        Validation and the name-uniqueness check run before the transaction
        is opened, so a rejected category never starts one.

        Args:
            category: The category to insert. Its ``id`` is set on success.

        Returns:
            The same Category instance, now carrying its id.

        Raises:
            ValidationError: If the name or description is blank.
            ConflictError: If another category already uses the name (any case).
            IntegrityError: If the insert affected no rows or produced no key.
        """
        logger.info("Attempting to save category: %s", category.name if category else None)
        raise_first(category_violations(category))

        if self.name_exists(category.name):
            logger.warning("Category name validation failed: %s", category.name)
            raise ConflictError(f"Category name already exists: {category.name}")

        row = category_to_row(category)
        with TransactionGuard(self._conn, "insert", _ENTITY) as tx:
            with closing(
                tx.execute(
                    "INSERT INTO category (name, description) VALUES (?, ?)",
                    (row["name"], row["description"]),
                )
            ) as cursor:
                if cursor.rowcount != 1 or cursor.lastrowid is None:
                    logger.error("No rows were affected during category insert")
                    raise IntegrityError(
                        "Unexpected error! No rows were affected during category insert operation"
                    )
                new_id = cursor.lastrowid

        category.id = new_id
        logger.info("Category inserted successfully! ID: %d", new_id)
        return category

    def update(self, category: Category) -> None:
        """Replace the name and description of an existing category.

        Raises:
            ValidationError: If the id is missing or a field is blank.
            ConflictError: If a different category already uses the name.
            NotFoundError: If no category has this id.
        """
        logger.info("Attempting to update category ID: %s", category.id if category else None)
        raise_first(category_violations(category, for_update=True))

        if self._name_taken_by_other(category.name, category.id):
            logger.warning("Category name validation failed: %s", category.name)
            raise ConflictError(f"Category name already exists: {category.name}")

        row = category_to_row(category)
        with TransactionGuard(self._conn, "update", _ENTITY) as tx:
            with closing(
                tx.execute(
                    "UPDATE category SET name = ?, description = ? WHERE id = ?",
                    (row["name"], row["description"], category.id),
                )
            ) as cursor:
                if cursor.rowcount == 0:
                    logger.warning("Category with ID %d not found", category.id)
                    raise NotFoundError(f"Category with ID {category.id} not found")

        logger.info("Category updated successfully. ID: %d", category.id)

    def remove(self, category_id: int) -> None:
        """Delete a category that no book references.

        The in-use check runs inside the same transaction as the delete.

        Raises:
            ValidationError: If ``category_id`` is None.
            ConflictError: If any book still belongs to the category.
            NotFoundError: If no category has this id.
        """
        logger.info("Attempting to remove category ID: %s", category_id)
        require_id(category_id, _ENTITY)

        with TransactionGuard(self._conn, "delete", _ENTITY) as tx:
            with closing(
                tx.execute("SELECT COUNT(*) FROM book WHERE category_id = ?", (category_id,))
            ) as cursor:
                book_count = cursor.fetchone()[0]
            if book_count > 0:
                logger.warning(
                    "Category removal blocked: %s (ID: %d)", CATEGORY_HAS_BOOKS, category_id
                )
                raise ConflictError(CATEGORY_HAS_BOOKS)

            with closing(tx.execute("DELETE FROM category WHERE id = ?", (category_id,))) as cursor:
                if cursor.rowcount == 0:
                    logger.warning("Category with ID %d not found", category_id)
                    raise NotFoundError(f"Category with ID {category_id} not found")

        logger.info("Category removed successfully. ID: %d", category_id)

    def find_by_id(self, category_id: int) -> Category | None:
        """Retrieve a category by its id."""
        with reading("select", _ENTITY), closing(
            self._conn.execute("SELECT * FROM category WHERE id = ?", (category_id,))
        ) as cursor:
            row = cursor.fetchone()
        return row_to_category(row) if row else None

    def find_all(self) -> list[Category]:
        """Return all categories, ordered by name."""
        with reading("list", _ENTITY), closing(
            self._conn.execute("SELECT * FROM category ORDER BY name")
        ) as cursor:
            categories = [row_to_category(row) for row in cursor.fetchall()]
        logger.debug("Found %d categories", len(categories))
        return categories

    def find_category_with_most_books(self) -> Category | None:
        """Return the category owning the most books, or None if there are no categories.

        Categories without books still count (with zero), so any existing
        category can be returned. Ties are broken by the store's ordering.
        """
        with reading("select most books", _ENTITY), closing(
            self._conn.execute(
                "SELECT c.id, c.name, c.description, COUNT(b.id) AS book_count "
                "FROM category c "
                "LEFT JOIN book b ON c.id = b.category_id "
                "GROUP BY c.id, c.name, c.description "
                "ORDER BY book_count DESC "
                "LIMIT 1"
            )
        ) as cursor:
            row = cursor.fetchone()
        if row is None:
            return None
        logger.debug("Category with most books: %s (%d books)", row["name"], row["book_count"])
        return row_to_category(row)

    def get_category_book_counts(self) -> dict[str, int]:
        """Map category name to book count, omitting categories with no books."""
        with reading("count books per", _ENTITY), closing(
            self._conn.execute(
                "SELECT c.name, COUNT(b.id) AS book_count "
                "FROM category c "
                "JOIN book b ON c.id = b.category_id "
                "GROUP BY c.id, c.name "
                "ORDER BY book_count DESC"
            )
        ) as cursor:
            return {row["name"]: row["book_count"] for row in cursor.fetchall()}

    def name_exists(self, name: str | None) -> bool:
        """Whether any category uses ``name``, compared case-insensitively."""
        if is_blank(name):
            return False
        with reading("check name of", _ENTITY), closing(
            self._conn.execute(
                "SELECT COUNT(*) FROM category WHERE casefold(name) = casefold(?)", (name,)
            )
        ) as cursor:
            return cursor.fetchone()[0] > 0

    def can_remove(self, category_id: int) -> bool:
        """Whether no book references the category."""
        with reading("check books of", _ENTITY), closing(
            self._conn.execute("SELECT COUNT(*) FROM book WHERE category_id = ?", (category_id,))
        ) as cursor:
            return cursor.fetchone()[0] == 0

    def _name_taken_by_other(self, name: str, category_id: int | None) -> bool:
        with reading("check name of", _ENTITY), closing(
            self._conn.execute(
                "SELECT COUNT(*) FROM category WHERE casefold(name) = casefold(?) AND id != ?",
                (name, category_id),
            )
        ) as cursor:
            return cursor.fetchone()[0] > 0
