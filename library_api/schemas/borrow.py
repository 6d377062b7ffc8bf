from __future__ import annotations

from library_api.schemas.common import CamelModel, UtcDatetime
from pydantic import Field


class BorrowOut(CamelModel):
    id: str
    book: str = Field(validation_alias="book_id", serialization_alias="book")
    quantity: int
    due_date: UtcDatetime
    created_at: UtcDatetime
    updated_at: UtcDatetime


class BorrowedBookOut(CamelModel):
    title: str
    isbn: str


class BorrowSummaryOut(CamelModel):
    book: BorrowedBookOut
    total_quantity: int
