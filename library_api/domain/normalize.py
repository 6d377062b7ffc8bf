from __future__ import annotations

import re
from uuid import UUID

_isbn_separators = re.compile(r"[-\s]")
_isbn_allowed = re.compile(r"[0-9\-\s]+")
_isbn_shape = re.compile(r"[0-9]{10}|[0-9]{13}")


def normalize_text(s: str) -> str:
    return s.strip()


def strip_isbn(raw: str) -> str:
    """Drop hyphens and whitespace: '978-0-7475-3269-9' -> '9780747532699'."""
    return _isbn_separators.sub("", raw)


def isbn_has_valid_chars(raw: str) -> bool:
    return bool(_isbn_allowed.fullmatch(raw))


def isbn_has_valid_length(raw: str) -> bool:
    """True when the digits left after stripping separators are exactly 10 or 13."""
    return bool(_isbn_shape.fullmatch(strip_isbn(raw)))


def is_valid_isbn(raw: str) -> bool:
    return isbn_has_valid_chars(raw) and isbn_has_valid_length(raw)


def normalize_id(raw: object) -> str | None:
    """Return the canonical UUID string for a record id, or None if malformed."""
    if not isinstance(raw, str):
        return None
    try:
        return str(UUID(raw.strip()))
    except ValueError:
        return None
