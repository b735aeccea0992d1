# ABOUTME: Typed error taxonomy for the Bookshelf persistence layer.
# ABOUTME: Stores raise these instead of leaking sqlite3 exceptions to callers.

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bookshelf.db.validation import Violation


class BookshelfError(Exception):
    """Base class for every error raised by the Bookshelf stores."""


class ValidationError(BookshelfError):
    """Caller-supplied data violates a precondition.

    Carries the violation that was reported (the first one found) and the
    full list of violations detected for the same value.
    """

    def __init__(
        self, violation: "Violation", violations: "list[Violation] | None" = None
    ) -> None:
        super().__init__(violation.message)
        self.violation = violation
        self.violations = violations or [violation]


class ConflictError(BookshelfError):
    """A uniqueness or in-use rule would be broken by the operation."""


class NotFoundError(BookshelfError):
    """The operation targets an id that does not exist."""


class IntegrityError(BookshelfError):
    """The store did not behave as expected (no rows affected, no generated key)."""


class DuplicateKeyError(ConflictError, IntegrityError):
    """A unique constraint was rejected by the store itself at write time."""


class StorageError(BookshelfError):
    """The underlying connection or statement failed.

    Args:
        operation: Operation being performed (e.g. ``"insert"``).
        entity: Entity type the operation targeted (e.g. ``"book"``).
        detail: Message from the driver.
    """

    def __init__(self, operation: str, entity: str, detail: str) -> None:
        super().__init__(f"Error during {operation} of {entity}: {detail}")
        self.operation = operation
        self.entity = entity
        self.detail = detail
