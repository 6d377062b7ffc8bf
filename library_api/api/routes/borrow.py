from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from library_api.api.rate_limit import rate_limiter
from library_api.core.config import settings
from library_api.db.session import get_db
from library_api.schemas.borrow import BorrowedBookOut, BorrowOut, BorrowSummaryOut
from library_api.schemas.common import Envelope
from library_api.services import borrow_service
from sqlalchemy.orm import Session

router = APIRouter(prefix="/borrow", tags=["borrow"])


@router.post(
    "",
    status_code=201,
    response_model=Envelope[BorrowOut],
    dependencies=[
        Depends(
            rate_limiter(
                "borrow",
                limit=settings.rate_limit_writes_per_window,
                window_seconds=settings.rate_limit_window_seconds,
            )
        )
    ],
)
def borrow_book(
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    borrow = borrow_service.borrow_book(db, payload)
    return Envelope[BorrowOut](
        message="Book borrowed successfully", data=BorrowOut.model_validate(borrow)
    )


@router.get("", response_model=Envelope[list[BorrowSummaryOut]])
def get_borrowed_summary(db: Session = Depends(get_db)):
    rows = borrow_service.get_borrowed_summary(db)
    return Envelope[list[BorrowSummaryOut]](
        message="Borrowed books summary retrieved successfully",
        data=[
            BorrowSummaryOut(
                book=BorrowedBookOut(title=r.title, isbn=r.isbn),
                total_quantity=r.total_quantity,
            )
            for r in rows
        ],
    )
