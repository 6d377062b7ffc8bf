from __future__ import annotations

from typing import Any, Optional, cast

from library_api.core.errors import DuplicateKeyError
from library_api.models.book import Book
from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


def _commit_book(db: Session, book: Book) -> Book:
    """Commit a pending book write, translating the isbn unique constraint."""
    isbn = book.isbn
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateKeyError("isbn", isbn) from exc
    db.refresh(book)
    return book


def create_book(db: Session, *, values: dict[str, Any]) -> Book:
    book = Book(**values)
    book.sync_availability()
    db.add(book)
    return _commit_book(db, book)


def get_book(db: Session, *, book_id: str) -> Optional[Book]:
    return db.get(Book, book_id)


def list_books(
    db: Session,
    *,
    genre: str | None,
    sort_attr: str,
    descending: bool,
    limit: int,
) -> list[Book]:
    column = getattr(Book, sort_attr)
    q = select(Book)
    if genre:
        q = q.where(Book.genre == genre)
    if descending:
        q = q.order_by(column.desc(), Book.id.desc())
    else:
        q = q.order_by(column.asc(), Book.id.asc())
    q = q.limit(limit)
    return list(db.execute(q).scalars().all())


def update_book(db: Session, *, book: Book, values: dict[str, Any]) -> Book:
    for k, v in values.items():
        setattr(book, k, v)
    book.sync_availability()
    return _commit_book(db, book)


def delete_book(db: Session, *, book: Book) -> None:
    db.delete(book)
    db.commit()


def try_decrement_copies(db: Session, *, book_id: str, quantity: int) -> bool:
    """Take ``quantity`` copies in one conditional UPDATE.

    Returns False (nothing written) when the book is gone or has fewer than
    ``quantity`` copies. Does not commit.
    """
    remaining = Book.copies - quantity
    stmt = (
        update(Book)
        .where(Book.id == book_id, Book.copies >= quantity)
        .values(copies=remaining, available=remaining > 0)
        .execution_options(synchronize_session=False)
    )
    res = cast(CursorResult[Any], db.execute(stmt))
    return bool(res.rowcount)


def decrement_copies(db: Session, *, book: Book, quantity: int) -> Book:
    """Read-modify-write decrement on a loaded book. Does not commit."""
    book.copies = book.copies - quantity
    book.sync_availability()
    return book
