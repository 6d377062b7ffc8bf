from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from library_api.core.errors import InsufficientStock, NotFound, ValidationError
from library_api.crud import books as books_crud
from library_api.models.book import Book
from library_api.models.borrow import Borrow
from library_api.services import book_service, borrow_service


def _due(days: int = 14) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _book(db_session, *, copies=5, isbn="9780553380163", title="T"):
    return book_service.create_book(
        db_session,
        {"title": title, "author": "A", "genre": "SCIENCE", "isbn": isbn, "copies": copies},
    )


def _stored(db_session, book_id):
    db_session.expire_all()
    return db_session.get(Book, book_id)


@pytest.mark.parametrize("mode", ["atomic", "check_then_set"])
def test_borrow_decrements_copies(db_session, mode):
    book = _book(db_session, copies=5)

    borrow = borrow_service.borrow_book(
        db_session, {"book": book.id, "quantity": 2, "dueDate": _due()}, mode=mode
    )
    assert borrow.id
    assert borrow.book_id == book.id
    assert borrow.quantity == 2

    stored = _stored(db_session, book.id)
    assert stored.copies == 3
    assert stored.available is True
    assert db_session.query(Borrow).count() == 1


@pytest.mark.parametrize("mode", ["atomic", "check_then_set"])
def test_borrow_last_copies_flips_available(db_session, mode):
    book = _book(db_session, copies=3)
    borrow_service.borrow_book(
        db_session, {"book": book.id, "quantity": 3, "dueDate": _due()}, mode=mode
    )

    stored = _stored(db_session, book.id)
    assert stored.copies == 0
    assert stored.available is False


@pytest.mark.parametrize("mode", ["atomic", "check_then_set"])
def test_borrow_more_than_available_fails_without_mutation(db_session, mode):
    book = _book(db_session, copies=5)

    with pytest.raises(InsufficientStock) as exc:
        borrow_service.borrow_book(
            db_session, {"book": book.id, "quantity": 10, "dueDate": _due()}, mode=mode
        )
    assert exc.value.details == {"available": 5, "requested": 10}
    assert "Available: 5" in exc.value.message
    assert "Requested: 10" in exc.value.message

    stored = _stored(db_session, book.id)
    assert stored.copies == 5
    assert stored.available is True
    assert db_session.query(Borrow).count() == 0


def test_borrow_past_due_date_fails(db_session):
    book = _book(db_session)
    with pytest.raises(ValidationError) as exc:
        borrow_service.borrow_book(
            db_session, {"book": book.id, "quantity": 1, "dueDate": _due(-1)}
        )
    assert exc.value.details[0]["field"] == "dueDate"
    assert _stored(db_session, book.id).copies == 5


def test_borrow_invalid_quantity_fails(db_session):
    book = _book(db_session)
    with pytest.raises(ValidationError):
        borrow_service.borrow_book(
            db_session, {"book": book.id, "quantity": 0, "dueDate": _due()}
        )


def test_borrow_malformed_book_id_fails(db_session):
    with pytest.raises(ValidationError):
        borrow_service.borrow_book(
            db_session, {"book": "nope", "quantity": 1, "dueDate": _due()}
        )


def test_borrow_unknown_book_not_found(db_session):
    with pytest.raises(NotFound):
        borrow_service.borrow_book(
            db_session, {"book": str(uuid4()), "quantity": 1, "dueDate": _due()}
        )


def test_conditional_decrement_refuses_to_go_negative(db_session):
    book = _book(db_session, copies=2)

    assert books_crud.try_decrement_copies(db_session, book_id=book.id, quantity=3) is False
    assert books_crud.try_decrement_copies(db_session, book_id=book.id, quantity=2) is True
    db_session.commit()

    stored = _stored(db_session, book.id)
    assert stored.copies == 0
    assert stored.available is False


def test_atomic_borrow_reports_stock_after_losing_race(db_session, monkeypatch):
    book = _book(db_session, copies=2)

    # Another request takes the copies between our read and our update.
    def stolen(db, *, book_id, quantity):
        db.query(Book).filter(Book.id == book_id).update(
            {"copies": 0, "available": False}, synchronize_session=False
        )
        db.commit()
        return False

    monkeypatch.setattr(books_crud, "try_decrement_copies", stolen)

    with pytest.raises(InsufficientStock) as exc:
        borrow_service.borrow_book(
            db_session, {"book": book.id, "quantity": 2, "dueDate": _due()}, mode="atomic"
        )
    assert exc.value.details == {"available": 0, "requested": 2}
    assert db_session.query(Borrow).count() == 0


def test_summary_totals_per_book(db_session):
    book = _book(db_session, copies=10)
    other = _book(db_session, copies=4, isbn="0-7475-3269-9", title="Other")

    for qty in (2, 3):
        borrow_service.borrow_book(
            db_session, {"book": book.id, "quantity": qty, "dueDate": _due()}
        )
    borrow_service.borrow_book(
        db_session, {"book": other.id, "quantity": 1, "dueDate": _due()}
    )

    rows = borrow_service.get_borrowed_summary(db_session)
    by_isbn = {r.isbn: r for r in rows}
    assert len(rows) == 2
    assert by_isbn["9780553380163"].title == "T"
    assert by_isbn["9780553380163"].total_quantity == 5
    assert by_isbn["0-7475-3269-9"].total_quantity == 1


def test_summary_drops_deleted_books(db_session):
    book = _book(db_session, copies=5)
    borrow_service.borrow_book(
        db_session, {"book": book.id, "quantity": 2, "dueDate": _due()}
    )
    book_id = book.id
    book_service.delete_book(db_session, book_id)

    assert borrow_service.get_borrowed_summary(db_session) == []
    # The borrow row itself survives the delete.
    assert db_session.query(Borrow).filter(Borrow.book_id == book_id).count() == 1


def test_summary_empty(db_session):
    assert borrow_service.get_borrowed_summary(db_session) == []
