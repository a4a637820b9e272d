"""SQLAlchemy models for the library vertical.

Each model inherits from Base and uses IdentityMixin for its generated id
and timestamps. Relationships are by value: a book names its author, and
rental history names its member (nation_id) and book. No foreign keys are
declared, so a book may reference an author that does not exist.
The to_dict() method provides a standard serialisation interface used by
repositories and routers.
"""

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base, IdentityMixin
from verticals.library.models.schemas import BookStatus


class Author(IdentityMixin, Base):
    """An author in the catalog."""

    __tablename__ = "author"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    birth_date: Mapped[str] = mapped_column(String(100), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "country": self.country,
            "birth_date": self.birth_date,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Book(IdentityMixin, Base):
    """A book; name is unique so a rental by name touches at most one row."""

    __tablename__ = "book"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[BookStatus] = mapped_column(
        Enum(
            BookStatus,
            name="status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=BookStatus.AVAILABLE,
    )
    author: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "year": self.year,
            "category": self.category,
            "status": self.status.value,
            "author": self.author,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Member(IdentityMixin, Base):
    """A library member, keyed externally by nation_id."""

    __tablename__ = "users"

    nation_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "nation_id": self.nation_id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class RentalRecord(IdentityMixin, Base):
    """One successful rental. Append-only."""

    __tablename__ = "users_history"

    nation_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    book_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    due_date: Mapped[str] = mapped_column(String(100), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "nation_id": self.nation_id,
            "book_name": self.book_name,
            "due_date": self.due_date,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
