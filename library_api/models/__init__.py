from library_api.models.base import Base
from library_api.models.book import Book
from library_api.models.borrow import Borrow


__all__ = [
    "Base",
    "Book",
    "Borrow",
]
