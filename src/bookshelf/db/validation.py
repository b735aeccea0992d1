# ABOUTME: Pure validation rules for categories and books, run before any database I/O.
# ABOUTME: Collects every violation but callers report the first one found.

from dataclasses import dataclass
from enum import Enum

from bookshelf.db.errors import ValidationError
from bookshelf.db.types import Book, Category

MIN_RELEASE_YEAR = 1967


class Rule(Enum):
    """Every precondition a caller-supplied entity can violate."""

    CATEGORY_MISSING = "Category cannot be null"
    CATEGORY_ID_MISSING = "Category ID cannot be null for update"
    CATEGORY_NAME_EMPTY = "Category name cannot be empty"
    CATEGORY_DESCRIPTION_EMPTY = "Category description cannot be empty"
    BOOK_MISSING = "Book cannot be null"
    BOOK_ID_MISSING = "Book ID cannot be null for update"
    BOOK_TITLE_EMPTY = "Book title cannot be empty"
    BOOK_AUTHOR_EMPTY = "Book author cannot be empty"
    BOOK_ISBN_EMPTY = "Book ISBN cannot be empty"
    BOOK_YEAR_MISSING = "Book release year cannot be null"
    BOOK_YEAR_INVALID = "Book release year must be >= {minimum}, received: {year}"
    BOOK_CATEGORY_INVALID = "Book must have a valid category"
    ID_MISSING = "{entity} ID cannot be null"
    AUTHOR_QUERY_EMPTY = "Author name cannot be empty"


@dataclass(frozen=True)
class Violation:
    """A single broken rule with its rendered message."""

    rule: Rule
    message: str

    @classmethod
    def of(cls, rule: Rule, **params: object) -> "Violation":
        return cls(rule, rule.value.format(**params))


def is_blank(value: str | None) -> bool:
    """True for ``None``, empty, or whitespace-only strings."""
    return value is None or not value.strip()


def is_valid_release_year(year: int | None) -> bool:
    """Whether ``year`` is an integer no earlier than MIN_RELEASE_YEAR."""
    return isinstance(year, int) and not isinstance(year, bool) and year >= MIN_RELEASE_YEAR


def category_violations(category: Category | None, *, for_update: bool = False) -> list[Violation]:
    """Return every rule ``category`` breaks, in reporting order."""
    if category is None:
        return [Violation.of(Rule.CATEGORY_MISSING)]

    violations = []
    if for_update and category.id is None:
        violations.append(Violation.of(Rule.CATEGORY_ID_MISSING))
    if is_blank(category.name):
        violations.append(Violation.of(Rule.CATEGORY_NAME_EMPTY))
    if is_blank(category.description):
        violations.append(Violation.of(Rule.CATEGORY_DESCRIPTION_EMPTY))
    return violations


def book_violations(book: Book | None, *, for_update: bool = False) -> list[Violation]:
    """Return every rule ``book`` breaks, in reporting order.

    The order matches the order checks are reported in: id (on update),
    title, author, ISBN, release year, then the category reference.
    """
    if book is None:
        return [Violation.of(Rule.BOOK_MISSING)]

    violations = []
    if for_update and book.id is None:
        violations.append(Violation.of(Rule.BOOK_ID_MISSING))
    if is_blank(book.title):
        violations.append(Violation.of(Rule.BOOK_TITLE_EMPTY))
    if is_blank(book.author):
        violations.append(Violation.of(Rule.BOOK_AUTHOR_EMPTY))
    if is_blank(book.isbn):
        violations.append(Violation.of(Rule.BOOK_ISBN_EMPTY))
    if book.release_year is None:
        violations.append(Violation.of(Rule.BOOK_YEAR_MISSING))
    elif not is_valid_release_year(book.release_year):
        violations.append(
            Violation.of(Rule.BOOK_YEAR_INVALID, minimum=MIN_RELEASE_YEAR, year=book.release_year)
        )
    if book.category is None or book.category.id is None:
        violations.append(Violation.of(Rule.BOOK_CATEGORY_INVALID))
    return violations


def raise_first(violations: list[Violation]) -> None:
    """Raise ValidationError for the first violation, if there is any."""
    if violations:
        raise ValidationError(violations[0], violations)


def require_id(entity_id: int | None, entity: str) -> int:
    """Return ``entity_id`` or raise ValidationError when it is missing."""
    if entity_id is None:
        raise_first([Violation.of(Rule.ID_MISSING, entity=entity.capitalize())])
    return entity_id  # type: ignore[return-value]
