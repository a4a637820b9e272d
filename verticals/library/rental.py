"""Rental transaction coordinator.

Renting a book is one transaction with two writes:

1. A conditional UPDATE flips the named book from Available to Rented and
   reports how many rows it changed.
2. Only if exactly one row changed, a users_history row is inserted.

The UPDATE is the first statement of the transaction, so the store's row
lock is the only thing serializing concurrent renters: of several requests
racing for the same book, one sees rowcount 1 and the rest see rowcount 0
and roll back with BookNotAvailable. There is no in-process lock and no
retry.
"""

import logging

from fastapi import Depends
from sqlalchemy import insert, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.database import get_session_factory
from core.errors import BookNotAvailable, store_errors
from core.observability.otel_setup import operation_span
from patterns.workflow_states import TransitionTable
from verticals.library.models.db_models import Book, RentalRecord
from verticals.library.models.schemas import BookStatus

logger = logging.getLogger(__name__)

# No return or restock operation exists, so Rented and NotAvailable are terminal.
BOOK_LIFECYCLE: TransitionTable[BookStatus] = TransitionTable({
    BookStatus.AVAILABLE: (BookStatus.RENTED,),
    BookStatus.NOT_AVAILABLE: (),
    BookStatus.RENTED: (),
})


class RentalCoordinator:
    """Atomically rents a book to a member.

    Usage::

        coordinator = RentalCoordinator(get_session_factory())
        receipt = await coordinator.rent_book("123", "Dune", "2024-01-01")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def rent_book(self, nation_id: str, book_name: str, due_date: str) -> dict:
        """Rent book_name to nation_id until due_date.

        Raises BookNotAvailable if no Available book has that name (missing,
        Rented or NotAvailable), and StoreFailure for any store fault. On
        either error nothing is written.
        """
        rentable_from = BOOK_LIFECYCLE.sources_for(BookStatus.RENTED)
        claim = (
            update(Book)
            .where(Book.name == book_name, Book.status.in_(rentable_from))
            .values(status=BookStatus.RENTED)
            .execution_options(synchronize_session=False)
        )
        record = insert(RentalRecord).values(
            nation_id=nation_id,
            book_name=book_name,
            due_date=due_date,
        )

        with operation_span("rent_book", book_name=book_name, nation_id=nation_id):
            async with store_errors("rent_book"):
                async with self.session_factory() as session:
                    async with session.begin():
                        result = await session.execute(claim)
                        if result.rowcount != 1:
                            # leaving the block via the exception rolls back
                            logger.info(
                                "rental refused: book=%r member=%r rows=%d",
                                book_name, nation_id, result.rowcount,
                            )
                            raise BookNotAvailable(book_name)
                        await session.execute(record)

        logger.info("book %r rented to %r until %s", book_name, nation_id, due_date)
        return {"nation_id": nation_id, "book_name": book_name, "due_date": due_date}


# ---------------------------------------------------------------------------
# FastAPI dependency factory
# ---------------------------------------------------------------------------

def get_rental_coordinator(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> RentalCoordinator:
    """FastAPI dependency for RentalCoordinator."""
    return RentalCoordinator(session_factory)
