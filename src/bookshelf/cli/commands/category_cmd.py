# ABOUTME: The `bookshelf category` command group for managing book categories.
# ABOUTME: Provides add, ls, show, update, rm, top, and counts subcommands.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookshelf.cli.options import db_option, library_session
from bookshelf.db.categories import CategoryStore
from bookshelf.db.types import Category

console = Console()


def _category_table(categories: list[Category]) -> Table:
    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Name", style="bold cyan")
    table.add_column("Description")
    for category in categories:
        table.add_row(str(category.id), escape(category.name), escape(category.description))
    return table


@click.group("category")
def category() -> None:
    """Manage book categories."""


@category.command("add")
@click.argument("name")
@click.argument("description")
@db_option
def category_add(name: str, description: str, db_path: Path | None) -> None:
    """Add a new category."""
    with library_session(db_path, console) as conn:
        saved = CategoryStore(conn).save(Category(name=name, description=description))
    console.print(
        f"Added category [bold cyan]{escape(saved.name)}[/bold cyan] with ID {saved.id}."
    )


@category.command("ls")
@db_option
def category_ls(db_path: Path | None) -> None:
    """List all categories, ordered by name."""
    with library_session(db_path, console) as conn:
        categories = CategoryStore(conn).find_all()

    if not categories:
        console.print("[yellow]No categories in the library.[/yellow]")
        return

    console.print(_category_table(categories))
    console.print(f"\n[dim]{len(categories)} category(ies)[/dim]")


@category.command("show")
@click.argument("category_id", type=int)
@db_option
def category_show(category_id: int, db_path: Path | None) -> None:
    """Show a single category."""
    with library_session(db_path, console) as conn:
        found = CategoryStore(conn).find_by_id(category_id)

    if found is None:
        console.print(f"[red]Category {category_id} not found.[/red]")
        raise SystemExit(1)

    console.print(_category_table([found]))


@category.command("update")
@click.argument("category_id", type=int)
@click.argument("name")
@click.argument("description")
@db_option
def category_update(category_id: int, name: str, description: str, db_path: Path | None) -> None:
    """Replace a category's name and description."""
    with library_session(db_path, console) as conn:
        CategoryStore(conn).update(Category(id=category_id, name=name, description=description))
    console.print(f"Updated category {category_id}.")


@category.command("rm")
@click.argument("category_id", type=int)
@db_option
def category_rm(category_id: int, db_path: Path | None) -> None:
    """Remove a category that has no books."""
    with library_session(db_path, console) as conn:
        CategoryStore(conn).remove(category_id)
    console.print(f"Removed category {category_id}.")


@category.command("top")
@db_option
def category_top(db_path: Path | None) -> None:
    """Show the category with the most books."""
    with library_session(db_path, console) as conn:
        top = CategoryStore(conn).find_category_with_most_books()

    if top is None:
        console.print("[yellow]No categories in the library.[/yellow]")
        return

    console.print(_category_table([top]))


@category.command("counts")
@db_option
def category_counts(db_path: Path | None) -> None:
    """List book counts for every category that has books."""
    with library_session(db_path, console) as conn:
        counts = CategoryStore(conn).get_category_book_counts()

    if not counts:
        console.print("[yellow]No categories with books.[/yellow]")
        return

    table = Table()
    table.add_column("Category", style="cyan")
    table.add_column("Books", style="dim", justify="right")
    for name, count in counts.items():
        table.add_row(escape(name), str(count))
    console.print(table)
