# ABOUTME: Converts between Category/Book values and SQLite rows or statement parameters.
# ABOUTME: Book rows come from a join and carry the owning category's columns.

from typing import Any

from bookshelf.db.types import Book, Category

# Column list shared by every book query; joins the owning category.
BOOK_SELECT = (
    "SELECT b.id, b.title, b.author, b.synopsis, b.isbn, b.release_year, b.category_id, "
    "c.name AS category_name, c.description AS category_description "
    "FROM book b "
    "JOIN category c ON b.category_id = c.id"
)


def category_to_row(category: Category) -> dict[str, Any]:
    """Convert a Category to a dict of column values suitable for INSERT/UPDATE."""
    return {
        "name": category.name,
        "description": category.description,
    }


def book_to_row(book: Book) -> dict[str, Any]:
    """Convert a Book to a dict of column values suitable for INSERT/UPDATE.

    Only the category's id is stored; its other fields live in the category table.
    """
    return {
        "title": book.title,
        "author": book.author,
        "synopsis": book.synopsis,
        "isbn": book.isbn,
        "release_year": book.release_year,
        "category_id": book.category.id if book.category else None,
    }


def row_to_category(row: Any) -> Category:
    """Convert a category table row (dict-like) to a Category."""
    return Category(id=row["id"], name=row["name"], description=row["description"])


def row_to_book(row: Any) -> Book:
    """Convert a joined book row to a Book carrying its full Category."""
    category = Category(
        id=row["category_id"],
        name=row["category_name"],
        description=row["category_description"],
    )
    return Book(
        id=row["id"],
        title=row["title"],
        author=row["author"],
        synopsis=row["synopsis"],
        isbn=row["isbn"],
        release_year=row["release_year"],
        category=category,
    )
