# ABOUTME: Category and Book value types persisted by the Bookshelf stores.
# ABOUTME: Plain dataclasses whose equality is decided by the store-assigned id.

from dataclasses import dataclass


@dataclass(eq=False)
class Category:
    """A book category. ``id`` is assigned by the store on first save.

    Hashable only once saved.
    """

    name: str
    description: str
    id: int | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Category):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        # Unsaved values have no stable id to hash.
        if self.id is None:
            raise TypeError("unhashable: Category without an id")
        return hash((Category, self.id))


@dataclass(eq=False)
class Book:
    """A cataloged book belonging to exactly one category.

    ``category`` only needs a valid ``id`` when saving; values read back from
    the store carry the category's full persisted data.
    """

    title: str
    author: str
    isbn: str
    release_year: int | None
    category: Category | None
    synopsis: str | None = None
    id: int | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        # Unsaved values have no stable id to hash.
        if self.id is None:
            raise TypeError("unhashable: Book without an id")
        return hash((Book, self.id))
