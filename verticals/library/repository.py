"""Library repositories: async database access for the catalog and members.

Extends BaseRepository with the three filtered queries (authors, books,
members joined with their rental history) and the detail lookups that
aggregate related rows at read time.
"""

from uuid import UUID

from fastapi import Depends
from sqlalchemy import Result, Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_session
from core.errors import NotFound, store_errors
from core.observability.otel_setup import operation_span
from patterns.repository import BaseRepository, FilterRule
from verticals.library.models.db_models import Author, Book, Member, RentalRecord


# ---------------------------------------------------------------------------
# Author repository
# ---------------------------------------------------------------------------

class AuthorRepository(BaseRepository[Author]):
    """Repository for author inserts, search and detail."""

    model = Author
    entity_name = "author"
    filter_rules = (
        FilterRule("name", Author.name),
        FilterRule("country", Author.country),
        FilterRule("birth_date", Author.birth_date),
    )

    async def detail(self, author_id: str | UUID) -> dict:
        """Author fields plus the names of books that credit this author."""
        author = await self.require(author_id)
        stmt = select(Book.name).where(Book.author == author["name"])
        with operation_span("author_detail", author=author["name"]):
            async with store_errors("author_detail"):
                result = await self.session.execute(stmt)
                author["books"] = list(result.scalars().all())
        return author


# ---------------------------------------------------------------------------
# Book repository
# ---------------------------------------------------------------------------

class BookRepository(BaseRepository[Book]):
    """Repository for book inserts, search and detail."""

    model = Book
    entity_name = "book"
    filter_rules = (
        FilterRule("name", Book.name),
        FilterRule("year", Book.year),
        FilterRule("category", Book.category),
        FilterRule("status", Book.status),
        FilterRule("author", Book.author),
    )

    async def detail(self, book_id: str | UUID) -> dict:
        return await self.require(book_id)


# ---------------------------------------------------------------------------
# Member repository
# ---------------------------------------------------------------------------

class MemberRepository(BaseRepository[Member]):
    """Repository for members and their rental history.

    Searches run over members joined with users_history on nation_id, so a
    member only appears once they have rented something.
    """

    model = Member
    entity_name = "user"
    filter_rules = (
        FilterRule("user_name", Member.name),
        FilterRule("book_name", RentalRecord.book_name),
    )

    def base_select(self) -> Select:
        return (
            select(
                Member.nation_id,
                Member.name.label("user_name"),
                RentalRecord.book_name,
            )
            .select_from(Member)
            .join(RentalRecord, RentalRecord.nation_id == Member.nation_id)
        )

    def serialize(self, result: Result) -> list[dict]:
        return [dict(row) for row in result.mappings().all()]

    async def history(self, nation_id: str) -> list[dict]:
        """Every rental recorded for a member, with the member's name."""
        stmt = (
            select(
                Member.name,
                RentalRecord.nation_id,
                RentalRecord.book_name,
                RentalRecord.due_date,
            )
            .select_from(RentalRecord)
            .join(Member, Member.nation_id == RentalRecord.nation_id)
            .where(RentalRecord.nation_id == nation_id)
        )
        with operation_span("member_history", nation_id=nation_id):
            async with store_errors("member_history"):
                result = await self.session.execute(stmt)
                rows = [dict(row) for row in result.mappings().all()]
        if not rows:
            raise NotFound(self.entity_name, f"no rental history for {nation_id!r}")
        return rows


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------

def get_author_repository(
    session: AsyncSession = Depends(get_session),
) -> AuthorRepository:
    """FastAPI dependency for AuthorRepository."""
    return AuthorRepository(session)


def get_book_repository(
    session: AsyncSession = Depends(get_session),
) -> BookRepository:
    """FastAPI dependency for BookRepository."""
    return BookRepository(session)


def get_member_repository(
    session: AsyncSession = Depends(get_session),
) -> MemberRepository:
    """FastAPI dependency for MemberRepository."""
    return MemberRepository(session)
