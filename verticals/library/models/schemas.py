"""Pydantic schemas for API request/response validation.

Query models double as filter criteria: every field is optional and a
field left as None places no constraint on the result.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BookStatus(str, Enum):
    AVAILABLE = "Available"
    NOT_AVAILABLE = "NotAvailable"
    RENTED = "Rented"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class AuthorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=100)
    birth_date: str = Field(..., min_length=1, max_length=100)


class BookCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    year: int
    category: str = Field(..., min_length=1, max_length=100)
    status: BookStatus = BookStatus.AVAILABLE
    author: str = Field(..., min_length=1, max_length=100)


class MemberCreate(BaseModel):
    nation_id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)


class RentBook(BaseModel):
    book_name: str = Field(..., min_length=1, max_length=255)
    due_date: str = Field(..., min_length=1, max_length=100)


class AuthorQuery(BaseModel):
    name: Optional[str] = None
    country: Optional[str] = None
    birth_date: Optional[str] = None


class BookQuery(BaseModel):
    name: Optional[str] = None
    year: Optional[int] = None
    category: Optional[str] = None
    status: Optional[BookStatus] = None
    author: Optional[str] = None


class MemberQuery(BaseModel):
    user_name: Optional[str] = None
    book_name: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class AuthorResponse(BaseModel):
    id: str
    name: str
    country: str
    birth_date: str
    created_at: Optional[datetime] = None


class AuthorDetailResponse(AuthorResponse):
    books: list[str] = []


class BookResponse(BaseModel):
    id: str
    name: str
    year: int
    category: str
    status: BookStatus
    author: str
    created_at: Optional[datetime] = None


class MemberResponse(BaseModel):
    id: str
    nation_id: str
    name: str
    created_at: Optional[datetime] = None


class MemberRentalRow(BaseModel):
    nation_id: str
    user_name: str
    book_name: str


class MemberHistoryRow(BaseModel):
    name: str
    nation_id: str
    book_name: str
    due_date: str


class RentalReceipt(BaseModel):
    nation_id: str
    book_name: str
    due_date: str


class CreatedAuthorBody(BaseModel):
    info: AuthorResponse
    id: str


class CreatedBookBody(BaseModel):
    info: BookResponse
    id: str


class CreatedMemberBody(BaseModel):
    info: MemberResponse
    id: str


class AuthorsBody(BaseModel):
    authors: list[AuthorResponse]


class GetAuthorBody(BaseModel):
    author: AuthorDetailResponse


class BooksBody(BaseModel):
    books: list[BookResponse]


class GetBookBody(BaseModel):
    book: BookResponse


class UsersBody(BaseModel):
    users: list[MemberRentalRow]


class GetUserBody(BaseModel):
    user: list[MemberHistoryRow]


class RentedBookBody(BaseModel):
    message: str
    info: RentalReceipt
