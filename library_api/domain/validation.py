"""Field validation for book and borrow payloads.

Validators never raise on their own; they return the cleaned values plus a
list of :class:`FieldError`. Callers turn a non-empty list into a
:class:`~library_api.core.errors.ValidationError` via :func:`raise_for_errors`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from library_api.core.errors import ValidationError
from library_api.domain.constants import (
    AUTHOR_MAX_LEN,
    COUNT_MAX,
    DESCRIPTION_MAX_LEN,
    GENRES,
    ISBN_HELP,
    ISBN_MAX_LEN,
    TITLE_MAX_LEN,
)
from library_api.domain.normalize import (
    isbn_has_valid_chars,
    isbn_has_valid_length,
    normalize_id,
    normalize_text,
)
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_datetime_adapter = TypeAdapter(datetime)


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    value: Any = None
    help: str | None = None

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"field": self.field, "message": self.message, "value": self.value}
        if self.help:
            out["help"] = self.help
        return out


@dataclass(frozen=True)
class BorrowInput:
    book_id: str
    quantity: int
    due_date: datetime


def raise_for_errors(errors: list[FieldError]) -> None:
    if not errors:
        return
    if len(errors) == 1 and errors[0].field == "isbn":
        message = "ISBN validation failed"
    else:
        message = "Validation failed"
    raise ValidationError(message, details=[e.as_dict() for e in errors])


def as_int(value: Any) -> int | None:
    """Strict integer coercion: bools and fractional numbers are not integers.

    Values outside the storable range (beyond +/- ``COUNT_MAX``) are rejected
    like any other non-integer.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and -COUNT_MAX <= value <= COUNT_MAX:
        return value
    return None


def _required_text(
    payload: Mapping[str, Any],
    field: str,
    label: str,
    max_len: int,
    cleaned: dict[str, Any],
    errors: list[FieldError],
) -> None:
    raw = payload.get(field)
    if raw is None:
        errors.append(FieldError(field, f"{label} is required", raw))
        return
    if not isinstance(raw, str):
        errors.append(FieldError(field, f"{label} must be a string", raw))
        return
    value = normalize_text(raw)
    if not value:
        errors.append(FieldError(field, f"{label} is required", raw))
    elif len(value) > max_len:
        errors.append(FieldError(field, f"{label} cannot exceed {max_len} characters", raw))
    else:
        cleaned[field] = value


def _check_isbn(raw: Any, cleaned: dict[str, Any], errors: list[FieldError]) -> None:
    if raw is None:
        errors.append(FieldError("isbn", "ISBN is required", raw))
        return
    if not isinstance(raw, str):
        errors.append(FieldError("isbn", "ISBN must be a string", raw, ISBN_HELP))
        return
    value = normalize_text(raw)
    if not value:
        errors.append(FieldError("isbn", "ISBN is required", raw))
    elif len(value) > ISBN_MAX_LEN:
        errors.append(
            FieldError("isbn", f"ISBN cannot exceed {ISBN_MAX_LEN} characters", raw, ISBN_HELP)
        )
    elif not isbn_has_valid_chars(value):
        errors.append(
            FieldError("isbn", "ISBN can only contain numbers, hyphens, and spaces", raw, ISBN_HELP)
        )
    elif not isbn_has_valid_length(value):
        errors.append(
            FieldError(
                "isbn",
                "ISBN must be exactly 10 or 13 digits (hyphens and spaces allowed)",
                raw,
                ISBN_HELP,
            )
        )
    else:
        cleaned["isbn"] = value


def validate_book(
    payload: Mapping[str, Any], *, partial: bool = False
) -> tuple[dict[str, Any], list[FieldError]]:
    """Validate a book payload.

    With ``partial=True`` (updates) only the keys present in ``payload`` are
    checked. Unknown keys are ignored here; the book service rejects them
    before calling this.
    """
    cleaned: dict[str, Any] = {}
    errors: list[FieldError] = []

    def wants(field: str) -> bool:
        return not partial or field in payload

    if wants("title"):
        _required_text(payload, "title", "Title", TITLE_MAX_LEN, cleaned, errors)
    if wants("author"):
        _required_text(payload, "author", "Author", AUTHOR_MAX_LEN, cleaned, errors)

    if wants("genre"):
        genre = payload.get("genre")
        if genre is None:
            errors.append(FieldError("genre", "Genre is required", genre))
        elif genre not in GENRES:
            errors.append(
                FieldError("genre", f"Genre must be one of: {', '.join(GENRES)}", genre)
            )
        else:
            cleaned["genre"] = genre

    if wants("isbn"):
        _check_isbn(payload.get("isbn"), cleaned, errors)

    if "description" in payload:
        raw = payload["description"]
        if raw is None:
            cleaned["description"] = None
        elif not isinstance(raw, str):
            errors.append(FieldError("description", "Description must be a string", raw))
        else:
            value = normalize_text(raw)
            if len(value) > DESCRIPTION_MAX_LEN:
                errors.append(
                    FieldError(
                        "description",
                        f"Description cannot exceed {DESCRIPTION_MAX_LEN} characters",
                        raw,
                    )
                )
            else:
                cleaned["description"] = value or None

    if wants("copies"):
        raw = payload.get("copies")
        copies = as_int(raw)
        if raw is None:
            errors.append(FieldError("copies", "Copies is required", raw))
        elif copies is None or copies < 0:
            errors.append(
                FieldError("copies", f"Copies must be an integer between 0 and {COUNT_MAX}", raw)
            )
        else:
            cleaned["copies"] = copies

    # `available` is derived from copies; only its type is checked.
    if "available" in payload and not isinstance(payload["available"], bool):
        errors.append(FieldError("available", "Available must be a boolean", payload["available"]))

    return cleaned, errors


def parse_due_date(value: Any) -> datetime | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        dt = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def validate_borrow(
    payload: Mapping[str, Any], *, now: datetime | None = None
) -> tuple[BorrowInput | None, list[FieldError]]:
    """Validate ``{book, quantity, dueDate}``; returns (input, errors)."""
    now = now or datetime.now(timezone.utc)
    errors: list[FieldError] = []

    raw_qty = payload.get("quantity")
    quantity = as_int(raw_qty)
    if raw_qty is None:
        errors.append(FieldError("quantity", "Quantity is required", raw_qty))
    elif quantity is None:
        errors.append(
            FieldError("quantity", f"Quantity must be an integer up to {COUNT_MAX}", raw_qty)
        )
    elif quantity < 1:
        errors.append(FieldError("quantity", "Quantity must be at least 1", raw_qty))

    raw_due = payload.get("dueDate")
    due_date = parse_due_date(raw_due)
    if raw_due is None:
        errors.append(FieldError("dueDate", "Due date is required", raw_due))
    elif due_date is None:
        errors.append(FieldError("dueDate", "Due date must be a valid date", raw_due))
    elif due_date <= now:
        errors.append(FieldError("dueDate", "Due date must be in the future", raw_due))

    raw_book = payload.get("book")
    book_id = normalize_id(raw_book)
    if raw_book is None:
        errors.append(FieldError("book", "Book reference is required", raw_book))
    elif book_id is None:
        errors.append(FieldError("book", "Invalid book ID format", raw_book))

    if errors or book_id is None or quantity is None or due_date is None:
        return None, errors
    return BorrowInput(book_id=book_id, quantity=quantity, due_date=due_date), []
