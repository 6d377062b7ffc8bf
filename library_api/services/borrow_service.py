"""Borrow workflow and the borrowed-books summary.

A borrow validates its input, checks stock, inserts the borrow row and takes
the copies off the book inside one database transaction. How the stock check
and the decrement are combined depends on ``settings.borrow_decrement_mode``:

``atomic``
    A single ``UPDATE books SET copies = copies - :q WHERE id = :id AND
    copies >= :q``. If no row matches, nothing is written and the request
    fails with ``InsufficientStock``. Concurrent borrows cannot push copies
    below zero.

``check_then_set``
    Load the book, compare, then write the new count. Two concurrent
    requests can both pass the check and over-borrow; kept only for
    deployments that need the historical behaviour.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from library_api.core.config import settings
from library_api.core.errors import InsufficientStock, InternalError, NotFound
from library_api.crud import books as books_crud
from library_api.crud import borrows as borrows_crud
from library_api.crud.borrows import BorrowSummaryRow
from library_api.domain.validation import raise_for_errors, validate_borrow
from library_api.models.borrow import Borrow
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def borrow_book(
    db: Session,
    payload: Mapping[str, Any],
    *,
    now: datetime | None = None,
    mode: str | None = None,
) -> Borrow:
    data, errors = validate_borrow(payload, now=now)
    raise_for_errors(errors)
    if data is None:
        raise InternalError("Borrow input was not validated")

    book = books_crud.get_book(db, book_id=data.book_id)
    if book is None:
        raise NotFound("Book not found")

    if book.copies < data.quantity:
        logger.warning(
            "borrow rejected book=%s available=%s requested=%s",
            book.id, book.copies, data.quantity,
        )
        raise InsufficientStock(available=book.copies, requested=data.quantity)

    mode = mode or settings.borrow_decrement_mode
    try:
        if mode == "atomic":
            if not books_crud.try_decrement_copies(
                db, book_id=book.id, quantity=data.quantity
            ):
                # Lost a race since the read above; report what is left now.
                db.rollback()
                current = books_crud.get_book(db, book_id=data.book_id)
                if current is None:
                    raise NotFound("Book not found")
                raise InsufficientStock(available=current.copies, requested=data.quantity)
        else:
            books_crud.decrement_copies(db, book=book, quantity=data.quantity)

        borrow = borrows_crud.add_borrow(
            db, book_id=book.id, quantity=data.quantity, due_date=data.due_date
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(borrow)
    logger.info(
        "book borrowed borrow=%s book=%s quantity=%s mode=%s",
        borrow.id, borrow.book_id, borrow.quantity, mode,
    )
    return borrow


def get_borrowed_summary(db: Session) -> list[BorrowSummaryRow]:
    return borrows_crud.borrowed_summary(db)
