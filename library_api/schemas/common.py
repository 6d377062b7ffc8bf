from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values for DateTime(timezone=True); they are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    """Output model serialized with camelCase keys (createdAt, dueDate, ...)."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    error: dict[str, Any] | None = None
