from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from library_api.models.book import Book
from library_api.models.borrow import Borrow
from sqlalchemy import func, select
from sqlalchemy.orm import Session


@dataclass(frozen=True)
class BorrowSummaryRow:
    book_id: str
    title: str
    isbn: str
    total_quantity: int


def add_borrow(
    db: Session, *, book_id: str, quantity: int, due_date: datetime
) -> Borrow:
    """Stage a borrow row in the current transaction. Does not commit."""
    borrow = Borrow(book_id=book_id, quantity=quantity, due_date=due_date)
    db.add(borrow)
    return borrow


def borrowed_summary(db: Session) -> list[BorrowSummaryRow]:
    """Total borrowed quantity per book.

    Inner join on books: borrows whose book has been deleted drop out.
    """
    totals = (
        select(
            Borrow.book_id.label("book_id"),
            func.sum(Borrow.quantity).label("total_quantity"),
        )
        .group_by(Borrow.book_id)
        .subquery()
    )
    stmt = select(Book.id, Book.title, Book.isbn, totals.c.total_quantity).join(
        totals, totals.c.book_id == Book.id
    )

    rows: list[BorrowSummaryRow] = []
    for book_id, title, isbn, total in db.execute(stmt).tuples().all():
        rows.append(
            BorrowSummaryRow(
                book_id=book_id, title=title, isbn=isbn, total_quantity=int(total or 0)
            )
        )
    return rows
