from __future__ import annotations

from enum import Enum


class Genre(str, Enum):
    FICTION = "FICTION"
    NON_FICTION = "NON_FICTION"
    SCIENCE = "SCIENCE"
    HISTORY = "HISTORY"
    BIOGRAPHY = "BIOGRAPHY"
    FANTASY = "FANTASY"


GENRES: tuple[str, ...] = tuple(g.value for g in Genre)

TITLE_MAX_LEN = 200
AUTHOR_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 1000
# Column widths: books.isbn is String(32); copies/quantity are 32-bit INTEGER.
ISBN_MAX_LEN = 32
COUNT_MAX = 2**31 - 1

# Keys accepted by a book update; anything else is rejected.
BOOK_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "author", "genre", "isbn", "description", "copies", "available"}
)

# Public (camelCase) sort keys -> Book attribute names.
BOOK_SORT_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "author": "author",
    "genre": "genre",
    "isbn": "isbn",
    "copies": "copies",
    "available": "available",
}
DEFAULT_BOOK_SORT = "createdAt"
DEFAULT_BOOK_LIMIT = 10

ISBN_HELP = (
    'ISBN should be 10 or 13 digits long. You can include hyphens or spaces '
    '(e.g., "0-7475-3269-9" or "978-0-7475-3269-9")'
)
