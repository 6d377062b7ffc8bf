from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class for errors that map onto an HTTP failure envelope."""

    kind = "InternalError"
    status_code = 500

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind}
        if self.details is not None:
            out["details"] = self.details
        return out


class ValidationError(AppError):
    """Malformed or disallowed input."""

    kind = "ValidationError"
    status_code = 400


class NotFound(AppError):
    kind = "NotFound"
    status_code = 404


class DuplicateKeyError(AppError):
    """A unique constraint was violated by a write."""

    kind = "DuplicateKeyError"
    status_code = 409

    def __init__(self, field: str, value: Any = None) -> None:
        super().__init__(
            f"Duplicate value for field '{field}'",
            details={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InsufficientStock(AppError):
    kind = "InsufficientStock"
    status_code = 400

    def __init__(self, *, available: int, requested: int) -> None:
        super().__init__(
            f"Not enough copies available. Available: {available}, Requested: {requested}",
            details={"available": available, "requested": requested},
        )
        self.available = available
        self.requested = requested


class InternalError(AppError):
    kind = "InternalError"
    status_code = 500
