"""Library API router: catalog, members and rentals.

Demonstrates the standard router pattern:
- Optional-filter search endpoints built from query parameters
- Create endpoints returning the stored row and its id
- Detail endpoints by id (authors, books) or natural key (members)
- Repository and coordinator injection via FastAPI Depends

Outcome mapping: NotFound -> 404, Conflict -> 409, StoreFailure -> 500.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from core.errors import Conflict, NotFound, StoreFailure
from verticals.library.models.schemas import (
    AuthorCreate,
    AuthorQuery,
    AuthorsBody,
    BookCreate,
    BookQuery,
    BooksBody,
    CreatedAuthorBody,
    CreatedBookBody,
    CreatedMemberBody,
    GetAuthorBody,
    GetBookBody,
    GetUserBody,
    MemberCreate,
    MemberQuery,
    RentBook,
    RentedBookBody,
    UsersBody,
)
from verticals.library.rental import RentalCoordinator, get_rental_coordinator
from verticals.library.repository import (
    AuthorRepository,
    BookRepository,
    MemberRepository,
    get_author_repository,
    get_book_repository,
    get_member_repository,
)

router = APIRouter()

INTERNAL_ERROR = "Internal server error"


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, Conflict):
        return HTTPException(status_code=409, detail=exc.message)
    return HTTPException(status_code=500, detail=INTERNAL_ERROR)


# ============================================================================
# Author Endpoints
# ============================================================================

@router.get("/author", response_model=AuthorsBody, tags=["author"])
async def authors(
    criteria: AuthorQuery = Depends(),
    repo: AuthorRepository = Depends(get_author_repository),
):
    """List authors matching every provided field."""
    try:
        rows = await repo.query(criteria)
    except (NotFound, StoreFailure) as exc:
        raise _http_error(exc) from exc
    return {"authors": rows}


@router.post("/author/create", response_model=CreatedAuthorBody, status_code=201, tags=["author"])
async def create_author(
    request: AuthorCreate,
    repo: AuthorRepository = Depends(get_author_repository),
):
    """Add an author to the catalog."""
    try:
        author = await repo.create(request.model_dump())
    except StoreFailure as exc:
        raise _http_error(exc) from exc
    return {"info": author, "id": author["id"]}


@router.get("/author/{author_id}", response_model=GetAuthorBody, tags=["author"])
async def get_author(
    author_id: UUID,
    repo: AuthorRepository = Depends(get_author_repository),
):
    """Get an author with the names of their books."""
    try:
        author = await repo.detail(author_id)
    except (NotFound, StoreFailure) as exc:
        raise _http_error(exc) from exc
    return {"author": author}


# ============================================================================
# Book Endpoints
# ============================================================================

@router.get("/book", response_model=BooksBody, tags=["book"])
async def books(
    criteria: BookQuery = Depends(),
    repo: BookRepository = Depends(get_book_repository),
):
    """List books matching every provided field."""
    try:
        rows = await repo.query(criteria)
    except (NotFound, StoreFailure) as exc:
        raise _http_error(exc) from exc
    return {"books": rows}


@router.post("/book/create", response_model=CreatedBookBody, status_code=201, tags=["book"])
async def create_book(
    request: BookCreate,
    repo: BookRepository = Depends(get_book_repository),
):
    """Add a book to the catalog (status defaults to Available)."""
    try:
        book = await repo.create(request.model_dump())
    except StoreFailure as exc:
        raise _http_error(exc) from exc
    return {"info": book, "id": book["id"]}


@router.get("/book/{book_id}", response_model=GetBookBody, tags=["book"])
async def get_book(
    book_id: UUID,
    repo: BookRepository = Depends(get_book_repository),
):
    """Get a single book."""
    try:
        book = await repo.detail(book_id)
    except (NotFound, StoreFailure) as exc:
        raise _http_error(exc) from exc
    return {"book": book}


# ============================================================================
# User Endpoints
# ============================================================================

@router.get("/user", response_model=UsersBody, tags=["user"])
async def users(
    criteria: MemberQuery = Depends(),
    repo: MemberRepository = Depends(get_member_repository),
):
    """List member rentals matching every provided field."""
    try:
        rows = await repo.query(criteria)
    except (NotFound, StoreFailure) as exc:
        raise _http_error(exc) from exc
    return {"users": rows}


@router.post("/user/create", response_model=CreatedMemberBody, status_code=201, tags=["user"])
async def create_user(
    request: MemberCreate,
    repo: MemberRepository = Depends(get_member_repository),
):
    """Register a member."""
    try:
        member = await repo.create(request.model_dump())
    except StoreFailure as exc:
        raise _http_error(exc) from exc
    return {"info": member, "id": member["id"]}


@router.post("/user/rent/{nation_id}", response_model=RentedBookBody, status_code=201, tags=["user"])
async def rent_book(
    nation_id: str,
    request: RentBook,
    coordinator: RentalCoordinator = Depends(get_rental_coordinator),
):
    """Rent a book to a member. Fails with 409 if the book is not Available."""
    try:
        receipt = await coordinator.rent_book(
            nation_id=nation_id,
            book_name=request.book_name,
            due_date=request.due_date,
        )
    except (Conflict, StoreFailure) as exc:
        raise _http_error(exc) from exc
    return {"message": "successfully book rented", "info": receipt}


@router.get("/user/{nation_id}", response_model=GetUserBody, tags=["user"])
async def get_user(
    nation_id: str,
    repo: MemberRepository = Depends(get_member_repository),
):
    """Get a member's rental history."""
    try:
        history = await repo.history(nation_id)
    except (NotFound, StoreFailure) as exc:
        raise _http_error(exc) from exc
    return {"user": history}
