# ABOUTME: The `bookshelf book` command group for managing cataloged books.
# ABOUTME: Provides add, ls, show, update, and rm subcommands with Rich output.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookshelf.cli.options import db_option, library_session
from bookshelf.db.books import BookStore
from bookshelf.db.types import Book, Category

console = Console()

synopsis_option = click.option("--synopsis", default=None, help="Short synopsis of the book.")


def _book_table(books: list[Book]) -> Table:
    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("ISBN")
    table.add_column("Year", width=5)
    table.add_column("Category", style="cyan")
    for book in books:
        table.add_row(
            str(book.id),
            escape(book.title),
            escape(book.author),
            escape(book.isbn),
            str(book.release_year),
            escape(book.category.name) if book.category else "[dim]unknown[/dim]",
        )
    return table


def _build_book(
    title: str,
    author: str,
    isbn: str,
    year: int,
    category_id: int,
    synopsis: str | None,
    book_id: int | None = None,
) -> Book:
    # Only the id matters when writing; the store resolves the rest.
    reference = Category(id=category_id, name="", description="")
    return Book(
        id=book_id,
        title=title,
        author=author,
        isbn=isbn,
        release_year=year,
        category=reference,
        synopsis=synopsis,
    )


@click.group("book")
def book() -> None:
    """Manage books."""


@book.command("add")
@click.argument("title")
@click.argument("author")
@click.argument("isbn")
@click.argument("year", type=int)
@click.argument("category_id", type=int)
@synopsis_option
@db_option
def book_add(
    title: str,
    author: str,
    isbn: str,
    year: int,
    category_id: int,
    synopsis: str | None,
    db_path: Path | None,
) -> None:
    """Add a book to an existing category."""
    with library_session(db_path, console) as conn:
        saved = BookStore(conn).save(
            _build_book(title, author, isbn, year, category_id, synopsis)
        )
    console.print(f"Added [bold]{escape(saved.title)}[/bold] with ID {saved.id}.")


@book.command("ls")
@click.option("--author", "author_filter", default=None, help="Filter by author substring.")
@click.option(
    "--category", "category_filter", type=int, default=None, help="Filter by category ID."
)
@db_option
def book_ls(author_filter: str | None, category_filter: int | None, db_path: Path | None) -> None:
    """List books, ordered by title. --author and --category combine."""
    with library_session(db_path, console) as conn:
        store = BookStore(conn)
        if author_filter is not None:
            books = store.find_by_author(author_filter)
            if category_filter is not None:
                books = [
                    b for b in books if b.category is not None and b.category.id == category_filter
                ]
        elif category_filter is not None:
            books = store.find_by_category(category_filter)
        else:
            books = store.find_all()

    if not books:
        if author_filter is not None or category_filter is not None:
            console.print("[yellow]No books match the given filters.[/yellow]")
        else:
            console.print("[yellow]No books in the library.[/yellow]")
        return

    console.print(_book_table(books))
    console.print(f"\n[dim]{len(books)} book(s)[/dim]")


@book.command("show")
@click.argument("book_id", type=int)
@db_option
def book_show(book_id: int, db_path: Path | None) -> None:
    """Show a single book and its synopsis."""
    with library_session(db_path, console) as conn:
        found = BookStore(conn).find_by_id(book_id)

    if found is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    console.print(_book_table([found]))
    if found.synopsis:
        console.print(f"\n{escape(found.synopsis)}")


@book.command("update")
@click.argument("book_id", type=int)
@click.argument("title")
@click.argument("author")
@click.argument("isbn")
@click.argument("year", type=int)
@click.argument("category_id", type=int)
@synopsis_option
@db_option
def book_update(
    book_id: int,
    title: str,
    author: str,
    isbn: str,
    year: int,
    category_id: int,
    synopsis: str | None,
    db_path: Path | None,
) -> None:
    """Replace every field of a book."""
    with library_session(db_path, console) as conn:
        BookStore(conn).update(
            _build_book(title, author, isbn, year, category_id, synopsis, book_id=book_id)
        )
    console.print(f"Updated book {book_id}.")


@book.command("rm")
@click.argument("book_id", type=int)
@db_option
def book_rm(book_id: int, db_path: Path | None) -> None:
    """Remove a book."""
    with library_session(db_path, console) as conn:
        BookStore(conn).remove(book_id)
    console.print(f"Removed book {book_id}.")
