# ABOUTME: Public API for the Bookshelf library database layer.
# ABOUTME: Exports connection management, the category and book stores, types, and errors.

import logging

from bookshelf.db.books import BookStore
from bookshelf.db.categories import CategoryStore
from bookshelf.db.connection import DEFAULT_DB_PATH, open_library
from bookshelf.db.errors import (
    BookshelfError,
    ConflictError,
    DuplicateKeyError,
    IntegrityError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from bookshelf.db.types import Book, Category

logging.getLogger("bookshelf").addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_DB_PATH",
    "Book",
    "BookStore",
    "BookshelfError",
    "Category",
    "CategoryStore",
    "ConflictError",
    "DuplicateKeyError",
    "IntegrityError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    "open_library",
]
