# ABOUTME: SQL DDL statements for the Bookshelf library database schema.
# ABOUTME: Defines the category and book tables with their keys and indexes.

SCHEMA = """
-- Categories own zero or more books
CREATE TABLE category (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL,
    description TEXT NOT NULL
);

-- Books always reference an existing category
CREATE TABLE book (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    title        TEXT NOT NULL,
    author       TEXT NOT NULL,
    synopsis     TEXT,
    isbn         TEXT NOT NULL UNIQUE,
    release_year INTEGER NOT NULL CHECK (release_year >= 1967),
    category_id  INTEGER NOT NULL REFERENCES category(id)
);

CREATE UNIQUE INDEX idx_category_name ON category(casefold(name));
CREATE INDEX idx_book_category_id ON book(category_id);
CREATE INDEX idx_book_title ON book(title);
"""
