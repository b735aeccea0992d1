# ABOUTME: CLI package for Bookshelf, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from bookshelf.cli.commands import book_cmd, category_cmd


def _configure_logging(verbose: bool) -> None:
    """Route bookshelf log records through Rich on stderr when ``verbose`` is set."""
    logger = logging.getLogger("bookshelf")
    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(handler)
    if verbose:
        logger.setLevel(logging.DEBUG)
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    else:
        logger.setLevel(logging.WARNING)


@click.group()
@click.version_option(package_name="bookshelf")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """Bookshelf - manage book categories and books in a SQLite library."""
    _configure_logging(verbose)


cli.add_command(category_cmd.category)
cli.add_command(book_cmd.book)
