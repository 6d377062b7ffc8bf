from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from library_api.api.rate_limit import rate_limiter
from library_api.core.config import settings
from library_api.db.session import get_db
from library_api.domain.constants import DEFAULT_BOOK_LIMIT, DEFAULT_BOOK_SORT
from library_api.schemas.books import BookOut
from library_api.schemas.common import Envelope
from library_api.services import book_service
from sqlalchemy.orm import Session

router = APIRouter(prefix="/books", tags=["books"])

write_limit = rate_limiter(
    "book_writes",
    limit=settings.rate_limit_writes_per_window,
    window_seconds=settings.rate_limit_window_seconds,
)


@router.post(
    "",
    status_code=201,
    response_model=Envelope[BookOut],
    dependencies=[Depends(write_limit)],
)
def create_book(
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    book = book_service.create_book(db, payload)
    return Envelope[BookOut](
        message="Book created successfully", data=BookOut.model_validate(book)
    )


@router.get("", response_model=Envelope[list[BookOut]])
def list_books(
    filter: str | None = None,
    sort_by: str = Query(DEFAULT_BOOK_SORT, alias="sortBy"),
    sort: str = "asc",
    limit: int = Query(DEFAULT_BOOK_LIMIT, ge=1),
    db: Session = Depends(get_db),
):
    books = book_service.list_books(
        db, filter=filter, sort_by=sort_by, sort=sort, limit=limit
    )
    return Envelope[list[BookOut]](
        message="Books retrieved successfully",
        data=[BookOut.model_validate(b) for b in books],
    )


@router.get("/{book_id}", response_model=Envelope[BookOut])
def get_book(book_id: str, db: Session = Depends(get_db)):
    book = book_service.get_book(db, book_id)
    return Envelope[BookOut](
        message="Book retrieved successfully", data=BookOut.model_validate(book)
    )


@router.put(
    "/{book_id}",
    response_model=Envelope[BookOut],
    dependencies=[Depends(write_limit)],
)
def update_book(
    book_id: str,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    book = book_service.update_book(db, book_id, payload)
    return Envelope[BookOut](
        message="Book updated successfully", data=BookOut.model_validate(book)
    )


@router.delete(
    "/{book_id}",
    response_model=Envelope[None],
    dependencies=[Depends(write_limit)],
)
def delete_book(book_id: str, db: Session = Depends(get_db)):
    book_service.delete_book(db, book_id)
    return Envelope[None](message="Book deleted successfully", data=None)
