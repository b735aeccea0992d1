# ABOUTME: Shared pytest fixtures for Bookshelf tests.
# ABOUTME: Provides a temporary library database, both stores, and sample categories and books.

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from bookshelf.db.books import BookStore
from bookshelf.db.categories import CategoryStore
from bookshelf.db.connection import open_library
from bookshelf.db.types import Book, Category


@pytest.fixture()
def conn(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    """A connection to a fresh temporary library database."""
    connection = open_library(tmp_path / "test.db")
    yield connection
    connection.close()


@pytest.fixture()
def categories(conn: sqlite3.Connection) -> CategoryStore:
    """CategoryStore backed by the temporary database."""
    return CategoryStore(conn)


@pytest.fixture()
def books(conn: sqlite3.Connection) -> BookStore:
    """BookStore backed by the temporary database."""
    return BookStore(conn)


@pytest.fixture()
def technical(categories: CategoryStore) -> Category:
    """A saved 'Technical' category."""
    return categories.save(
        Category(name="Technical", description="Programming and technical books")
    )


@pytest.fixture()
def clean_code(books: BookStore, technical: Category) -> Book:
    """A saved 'Clean Code' book in the Technical category."""
    return books.save(
        Book(
            title="Clean Code",
            author="Robert C. Martin",
            synopsis="A handbook of agile software craftsmanship",
            isbn="9780132350884",
            release_year=2008,
            category=technical,
        )
    )
