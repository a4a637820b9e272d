"""Typed outcomes for data-access operations.

Callers distinguish three failure kinds:
- NotFound: a query matched nothing, or an id lookup found no row
- Conflict: a business precondition failed (e.g. the book is not available)
- StoreFailure: the store itself failed (pool timeout, lost connection,
  constraint violation, commit error)

None of these are retried here.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Base exception for library data-access outcomes."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LibraryError):
    """Raised when a lookup or filtered query matched zero rows."""

    def __init__(self, entity: str, message: str | None = None):
        super().__init__(message or f"{entity} not found")
        self.entity = entity


class Conflict(LibraryError):
    """Raised when a write is refused because of the current row state."""
    pass


class BookNotAvailable(Conflict):
    """Raised when a rental finds no Available book with the given name."""

    def __init__(self, book_name: str):
        super().__init__(f"book {book_name!r} is not available for rent")
        self.book_name = book_name


class StoreFailure(LibraryError):
    """Raised for any infrastructure fault talking to the store."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {type(cause).__name__}")
        self.operation = operation
        self.cause = cause


@asynccontextmanager
async def store_errors(operation: str) -> AsyncGenerator[None, None]:
    """Translate driver/pool exceptions into StoreFailure.

    Usage::

        async with store_errors("insert_book"):
            await session.flush()
    """
    try:
        yield
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
        logger.error("%s failed: %s", operation, exc)
        raise StoreFailure(operation, exc) from exc
