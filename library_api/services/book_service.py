from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from library_api.core.config import settings
from library_api.core.errors import NotFound, ValidationError
from library_api.crud import books as books_crud
from library_api.domain.constants import (
    BOOK_SORT_FIELDS,
    BOOK_UPDATABLE_FIELDS,
    DEFAULT_BOOK_LIMIT,
    DEFAULT_BOOK_SORT,
)
from library_api.domain.normalize import normalize_id
from library_api.domain.validation import raise_for_errors, validate_book
from library_api.models.book import Book
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def parse_book_id(raw: Any) -> str:
    book_id = normalize_id(raw)
    if book_id is None:
        raise ValidationError(
            "Invalid book ID format",
            details=[{"field": "id", "message": "Invalid book ID format", "value": raw}],
        )
    return book_id


def create_book(db: Session, payload: Mapping[str, Any]) -> Book:
    values, errors = validate_book(payload)
    raise_for_errors(errors)

    book = books_crud.create_book(db, values=values)
    logger.info("book created id=%s isbn=%s copies=%s", book.id, book.isbn, book.copies)
    return book


def list_books(
    db: Session,
    *,
    filter: str | None = None,
    sort_by: str | None = DEFAULT_BOOK_SORT,
    sort: str | None = "asc",
    limit: int = DEFAULT_BOOK_LIMIT,
) -> list[Book]:
    """Books optionally filtered by genre, ordered and truncated to ``limit``.

    Unknown ``sort_by`` values fall back to ``createdAt``; any ``sort`` other
    than ``desc`` sorts ascending.
    """
    sort_attr = BOOK_SORT_FIELDS.get(sort_by or DEFAULT_BOOK_SORT)
    if sort_attr is None:
        logger.debug("unknown sort field %r; using %s", sort_by, DEFAULT_BOOK_SORT)
        sort_attr = BOOK_SORT_FIELDS[DEFAULT_BOOK_SORT]

    limit = max(1, min(limit, settings.book_list_max_limit))
    return books_crud.list_books(
        db,
        genre=filter or None,
        sort_attr=sort_attr,
        descending=(sort or "").lower() == "desc",
        limit=limit,
    )


def get_book(db: Session, book_id: Any) -> Book:
    book = books_crud.get_book(db, book_id=parse_book_id(book_id))
    if book is None:
        raise NotFound("Book not found")
    return book


def update_book(db: Session, book_id: Any, payload: Mapping[str, Any]) -> Book:
    book_id = parse_book_id(book_id)
    unknown = [k for k in payload if k not in BOOK_UPDATABLE_FIELDS]
    if unknown:
        raise ValidationError(
            f"Unknown fields: {', '.join(unknown)}",
            details=[{"field": k, "message": "Unknown field", "value": payload[k]} for k in unknown],
        )

    book = get_book(db, book_id)

    values, errors = validate_book(payload, partial=True)
    raise_for_errors(errors)

    book = books_crud.update_book(db, book=book, values=values)
    logger.info("book updated id=%s fields=%s", book.id, sorted(payload))
    return book


def delete_book(db: Session, book_id: Any) -> None:
    book = get_book(db, book_id)
    deleted_id = book.id
    # Borrows referencing this book are left in place.
    books_crud.delete_book(db, book=book)
    logger.info("book deleted id=%s", deleted_id)
