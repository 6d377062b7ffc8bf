from __future__ import annotations

from library_api.schemas.common import CamelModel, UtcDatetime


class BookOut(CamelModel):
    id: str
    title: str
    author: str
    genre: str
    isbn: str
    description: str | None = None
    copies: int
    available: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime
