from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from library_api.models.base import Base
from sqlalchemy import Boolean, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Book(Base):
    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False)

    # One of library_api.domain.constants.Genre
    genre: Mapped[str] = mapped_column(String(20), index=True, nullable=False)

    # Stored as submitted (trimmed); hyphens/spaces are kept.
    isbn: Mapped[str] = mapped_column(String(32), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    copies: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Always copies > 0; refreshed by sync_availability() before each write.
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("isbn", name="uq_books_isbn"),)

    def sync_availability(self) -> None:
        self.available = self.copies > 0
