# ABOUTME: Shared Click options and connection handling for Bookshelf CLI commands.
# ABOUTME: Provides the --db option and a session that reports library errors and closes up.

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bookshelf.db.connection import DEFAULT_DB_PATH, open_library
from bookshelf.db.errors import BookshelfError

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    envvar="BOOKSHELF_DB",
    help=f"Path to library database (default: {DEFAULT_DB_PATH})",
)


@contextmanager
def library_session(db_path: Path | None, console: Console) -> Iterator[sqlite3.Connection]:
    """Open the library for one command.

    Library errors are printed in red and turned into exit status 1. The
    connection is closed on every exit path.
    """
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        yield conn
    except BookshelfError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()
