# ABOUTME: Opens the Bookshelf library database and prepares each connection for the stores.
# ABOUTME: Registers the casefold() SQL function that category-name uniqueness depends on.

import sqlite3
from pathlib import Path

from bookshelf.db.schema import SCHEMA

DEFAULT_DB_PATH = Path.home() / ".bookshelf" / "library.db"


def casefold(value: str | None) -> str | None:
    """Unicode-aware case folding exposed to SQL; NULL stays NULL."""
    return value.casefold() if value is not None else None


def _has_tables(conn: sqlite3.Connection) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'category'"
    ).fetchone()
    return row is not None


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Return a connection to the library at ``path`` (``DEFAULT_DB_PATH`` if omitted).

    A missing file, along with its directory, is created and given the
    schema. Every connection gets WAL journaling, enforced foreign keys,
    ``sqlite3.Row`` results and the ``casefold`` function. The unique index
    on category names is built on ``casefold``, so category rows must only
    be written through connections returned here.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.create_function("casefold", 1, casefold, deterministic=True)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    if not _has_tables(conn):
        conn.executescript(SCHEMA)

    return conn
