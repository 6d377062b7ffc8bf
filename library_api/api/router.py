from __future__ import annotations

from fastapi import APIRouter
from library_api.api.routes import books, borrow, health

api_router = APIRouter()

# Keep this list in the order you want routes registered.
for _mod in (health, books, borrow):
    api_router.include_router(_mod.router)
