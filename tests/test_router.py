"""Test the HTTP surface end to end."""
import asyncio

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from api.main import app


@pytest_asyncio.fixture
async def client(session_factory):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _seed_dune(client: httpx.AsyncClient) -> dict:
    author = await client.post(
        "/api/author/create",
        json={"name": "Jane Doe", "country": "USA", "birth_date": "1980-01-01"},
    )
    assert author.status_code == 201
    book = await client.post(
        "/api/book/create",
        json={"name": "Dune", "year": 1965, "category": "SciFi",
              "status": "Available", "author": "Jane Doe"},
    )
    assert book.status_code == 201
    member = await client.post("/api/user/create", json={"nation_id": "123", "name": "Alice"})
    assert member.status_code == 201
    return {"author": author.json(), "book": book.json(), "member": member.json()}


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_rental_scenario(client):
    created = await _seed_dune(client)
    assert created["book"]["info"]["status"] == "Available"
    assert created["book"]["id"] == created["book"]["info"]["id"]

    response = await client.post(
        "/api/user/rent/123", json={"book_name": "Dune", "due_date": "2024-01-01"}
    )
    assert response.status_code == 201
    assert response.json() == {
        "message": "successfully book rented",
        "info": {"nation_id": "123", "book_name": "Dune", "due_date": "2024-01-01"},
    }

    book = await client.get(f"/api/book/{created['book']['id']}")
    assert book.json()["book"]["status"] == "Rented"

    again = await client.post(
        "/api/user/rent/123", json={"book_name": "Dune", "due_date": "2024-02-01"}
    )
    assert again.status_code == 409

    history = await client.get("/api/user/123")
    assert history.status_code == 200
    assert history.json()["user"] == [
        {"name": "Alice", "nation_id": "123", "book_name": "Dune", "due_date": "2024-01-01"}
    ]


@pytest.mark.asyncio
async def test_book_queries(client):
    await _seed_dune(client)

    by_author = await client.get("/api/book", params={"author": "Jane Doe"})
    assert by_author.status_code == 200
    assert [b["name"] for b in by_author.json()["books"]] == ["Dune"]

    everything = await client.get("/api/book")
    assert "Dune" in [b["name"] for b in everything.json()["books"]]

    missing = await client.get("/api/book", params={"name": "Nonexistent"})
    assert missing.status_code == 404

    by_status = await client.get("/api/book", params={"status": "Available", "year": 1965})
    assert [b["name"] for b in by_status.json()["books"]] == ["Dune"]


@pytest.mark.asyncio
async def test_author_endpoints(client):
    created = await _seed_dune(client)

    listed = await client.get("/api/author", params={"country": "USA"})
    assert listed.status_code == 200
    assert [a["name"] for a in listed.json()["authors"]] == ["Jane Doe"]

    detail = await client.get(f"/api/author/{created['author']['id']}")
    assert detail.status_code == 200
    assert detail.json()["author"]["books"] == ["Dune"]

    unknown = await client.get("/api/author/00000000-0000-0000-0000-000000000000")
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_user_queries(client):
    await _seed_dune(client)
    assert (await client.get("/api/user")).status_code == 404

    await client.post("/api/user/rent/123", json={"book_name": "Dune", "due_date": "2024-01-01"})

    users = await client.get("/api/user", params={"user_name": "Alice", "book_name": "Dune"})
    assert users.status_code == 200
    assert users.json()["users"] == [{"nation_id": "123", "user_name": "Alice", "book_name": "Dune"}]

    assert (await client.get("/api/user/unknown")).status_code == 404


@pytest.mark.asyncio
async def test_duplicate_author_is_generic_failure(client):
    await _seed_dune(client)
    response = await client.post(
        "/api/author/create",
        json={"name": "Jane Doe", "country": "UK", "birth_date": "1970-01-01"},
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"


@pytest.mark.asyncio
async def test_concurrent_rent_requests(client):
    await _seed_dune(client)
    await client.post("/api/user/create", json={"nation_id": "456", "name": "Bob"})

    first, second = await asyncio.gather(
        client.post("/api/user/rent/123", json={"book_name": "Dune", "due_date": "2024-01-01"}),
        client.post("/api/user/rent/456", json={"book_name": "Dune", "due_date": "2024-01-01"}),
    )

    assert sorted([first.status_code, second.status_code]) == [201, 409]
    users = await client.get("/api/user", params={"book_name": "Dune"})
    assert len(users.json()["users"]) == 1


@pytest.mark.asyncio
async def test_request_id_header_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_failed_commit_reports_error_and_stores_nothing(client, monkeypatch):
    async def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)
    response = await client.post(
        "/api/author/create",
        json={"name": "Zed", "country": "Chile", "birth_date": "1990-05-05"},
    )
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert (await client.get("/api/author", params={"name": "Zed"})).status_code == 404
