# ABOUTME: Persistence operations for books in the Bookshelf library.
# ABOUTME: Save, update, remove, and lookups that return each book with its full category.

import logging
import sqlite3
from contextlib import closing

from bookshelf.db.errors import ConflictError, IntegrityError, NotFoundError
from bookshelf.db.mapping import BOOK_SELECT, book_to_row, row_to_book
from bookshelf.db.transaction import TransactionGuard, reading
from bookshelf.db.types import Book
from bookshelf.db.validation import (
    Rule,
    Violation,
    book_violations,
    is_blank,
    raise_first,
    require_id,
)

logger = logging.getLogger(__name__)

_ENTITY = "book"


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches literally (escape char ``\\``)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BookStore:
    """Wraps a sqlite3 connection and provides typed CRUD for the book table.

    Every book returned by a lookup carries its owning Category with all
    persisted fields populated.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def save(self, book: Book) -> Book:
        """Insert a new book and assign its generated id.

        Field validation runs before the transaction. The ISBN uniqueness
        check and then the category existence check run as the first
        statements inside it, so whichever fails first is reported.

        Args:
            book: The book to insert. Its ``category`` must carry the id of
                an existing category. Its ``id`` is set on success.

        Returns:
            The same Book instance, now carrying its id.

        Raises:
            ValidationError: If a field is blank, the release year is missing
                or before 1967, or the category reference has no id.
            ConflictError: If another book already has this ISBN.
            NotFoundError: If the referenced category does not exist.
            IntegrityError: If the insert affected no rows or produced no key.
        """
        logger.info("Attempting to save book: %s", book.title if book else None)
        raise_first(book_violations(book))

        row = book_to_row(book)
        with TransactionGuard(self._conn, "insert", _ENTITY) as tx:
            self._check_isbn_free(tx, book.isbn)
            self._check_category_exists(tx, row["category_id"])

            with closing(
                tx.execute(
                    "INSERT INTO book "
                    "(title, author, synopsis, isbn, release_year, category_id) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        row["title"],
                        row["author"],
                        row["synopsis"],
                        row["isbn"],
                        row["release_year"],
                        row["category_id"],
                    ),
                )
            ) as cursor:
                if cursor.rowcount != 1 or cursor.lastrowid is None:
                    logger.error("No rows were affected during book insert")
                    raise IntegrityError(
                        "Unexpected error! No rows were affected during book insert operation"
                    )
                new_id = cursor.lastrowid

        book.id = new_id
        logger.info("Book inserted successfully! ID: %d", new_id)
        return book

    def update(self, book: Book) -> None:
        """Replace every mutable field of an existing book.

        The ISBN is only checked against other books, so keeping a book's
        own ISBN is never a conflict.

        Raises:
            ValidationError: If the id is missing or any save rule fails.
            ConflictError: If a different book already has this ISBN.
            NotFoundError: If the referenced category or the book itself
                does not exist.
        """
        logger.info("Attempting to update book ID: %s", book.id if book else None)
        raise_first(book_violations(book, for_update=True))

        row = book_to_row(book)
        with TransactionGuard(self._conn, "update", _ENTITY) as tx:
            self._check_isbn_free(tx, book.isbn, exclude_id=book.id)
            self._check_category_exists(tx, row["category_id"])

            with closing(
                tx.execute(
                    "UPDATE book SET title = ?, author = ?, synopsis = ?, isbn = ?, "
                    "release_year = ?, category_id = ? WHERE id = ?",
                    (
                        row["title"],
                        row["author"],
                        row["synopsis"],
                        row["isbn"],
                        row["release_year"],
                        row["category_id"],
                        book.id,
                    ),
                )
            ) as cursor:
                if cursor.rowcount == 0:
                    logger.warning("Book with ID %d not found", book.id)
                    raise NotFoundError(f"Book with ID {book.id} not found")

        logger.info("Book updated successfully. ID: %d", book.id)

    def remove(self, book_id: int) -> None:
        """Delete a book.

        Raises:
            ValidationError: If ``book_id`` is None.
            NotFoundError: If no book has this id.
        """
        logger.info("Attempting to remove book ID: %s", book_id)
        require_id(book_id, _ENTITY)

        with TransactionGuard(self._conn, "delete", _ENTITY) as tx:
            with closing(tx.execute("DELETE FROM book WHERE id = ?", (book_id,))) as cursor:
                if cursor.rowcount == 0:
                    logger.warning("Book with ID %d not found", book_id)
                    raise NotFoundError(f"Book with ID {book_id} not found")

        logger.info("Book removed successfully. ID: %d", book_id)

    def find_by_id(self, book_id: int) -> Book | None:
        """Retrieve a book by its id."""
        with reading("select", _ENTITY), closing(
            self._conn.execute(f"{BOOK_SELECT} WHERE b.id = ?", (book_id,))
        ) as cursor:
            row = cursor.fetchone()
        return row_to_book(row) if row else None

    def find_all(self) -> list[Book]:
        """Return all books, ordered by title."""
        return self._query("list", f"{BOOK_SELECT} ORDER BY b.title")

    def find_by_author(self, author: str) -> list[Book]:
        """Return books whose author contains ``author``, ignoring case, ordered by title.

        Raises:
            ValidationError: If ``author`` is blank.
        """
        if is_blank(author):
            raise_first([Violation.of(Rule.AUTHOR_QUERY_EMPTY)])
        pattern = f"%{_escape_like(author.strip())}%"
        return self._query(
            "search by author",
            f"{BOOK_SELECT} WHERE casefold(b.author) LIKE casefold(?) ESCAPE '\\' "
            "ORDER BY b.title",
            (pattern,),
        )

    def find_by_category(self, category_id: int) -> list[Book]:
        """Return the books of a category, ordered by title.

        An unknown category id yields an empty list.
        """
        return self._query(
            "search by category",
            f"{BOOK_SELECT} WHERE b.category_id = ? ORDER BY b.title",
            (category_id,),
        )

    def isbn_exists(self, isbn: str | None) -> bool:
        """Whether any book already has ``isbn``."""
        if is_blank(isbn):
            return False
        with reading("check isbn of", _ENTITY), closing(
            self._conn.execute("SELECT COUNT(*) FROM book WHERE isbn = ?", (isbn,))
        ) as cursor:
            return cursor.fetchone()[0] > 0

    def category_exists(self, category_id: int | None) -> bool:
        """Whether a category with ``category_id`` exists."""
        if category_id is None:
            return False
        with reading("check category of", _ENTITY), closing(
            self._conn.execute("SELECT COUNT(*) FROM category WHERE id = ?", (category_id,))
        ) as cursor:
            return cursor.fetchone()[0] > 0

    def _query(self, operation: str, sql: str, params: tuple = ()) -> list[Book]:
        with reading(operation, _ENTITY), closing(self._conn.execute(sql, params)) as cursor:
            books = [row_to_book(row) for row in cursor.fetchall()]
        logger.debug("%s returned %d books", operation, len(books))
        return books

    def _check_isbn_free(
        self, tx: TransactionGuard, isbn: str, exclude_id: int | None = None
    ) -> None:
        sql = "SELECT COUNT(*) FROM book WHERE isbn = ?"
        params: tuple = (isbn,)
        if exclude_id is not None:
            sql += " AND id != ?"
            params = (isbn, exclude_id)
        with closing(tx.execute(sql, params)) as cursor:
            taken = cursor.fetchone()[0] > 0
        if taken:
            logger.warning("ISBN already exists in the system: %s", isbn)
            raise ConflictError(f"ISBN already exists in the system: {isbn}")

    def _check_category_exists(self, tx: TransactionGuard, category_id: int) -> None:
        with closing(
            tx.execute("SELECT COUNT(*) FROM category WHERE id = ?", (category_id,))
        ) as cursor:
            exists = cursor.fetchone()[0] > 0
        if not exists:
            logger.warning("Category with ID %d does not exist", category_id)
            raise NotFoundError(f"Category with ID {category_id} does not exist")
