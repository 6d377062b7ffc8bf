from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Library Management Server is running!"


@router.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}
