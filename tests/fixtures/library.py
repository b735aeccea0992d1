# ABOUTME: Builders for unsaved Category and Book values used across tests.
# ABOUTME: Valid defaults keep each test focused on the one field it changes.

from bookshelf.db.types import Book, Category


def make_book(category: Category | None, /, **overrides: object) -> Book:
    """Build an unsaved Book with valid defaults, overriding any field.

    ``category`` is positional-only so ``category=...`` can be passed as an
    override alongside it.
    """
    fields: dict = {
        "title": "The Pragmatic Programmer",
        "author": "Andrew Hunt",
        "synopsis": "From journeyman to master",
        "isbn": "9780201616224",
        "release_year": 1999,
        "category": category,
    }
    fields.update(overrides)
    return Book(**fields)
